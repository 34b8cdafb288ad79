class PreconditionError(ValueError):
    """Invalid image or configuration, raised before any buffer or thread exists."""


class QueueClosedError(RuntimeError):
    """A tile was pushed onto a stage queue after it was closed."""


class PipelineError(RuntimeError):
    """The pipeline did not reach Done (worker failure or tile accounting mismatch)."""


class PipelineCancelled(PipelineError):
    """The cancel event was set while the pipeline was running."""


class ImageFormatError(ValueError):
    """An image file could not be parsed."""

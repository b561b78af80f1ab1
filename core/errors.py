class VisualizerError(Exception):
    """Base class for every error raised by the visualizer core."""


class UserInputError(VisualizerError):
    """Invalid user input; reported as a toast, nothing was mutated."""


class BusyRejection(VisualizerError):
    """An operation was attempted while another one holds the gate."""


class ExhaustedError(VisualizerError, IndexError):
    """Advancing an animation queue whose cursor already sits at the end."""

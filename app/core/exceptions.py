class BridgeError(Exception):
    """Base class for failures raised around the remote executor."""


class QueryFailedError(BridgeError):
    """A labelled query inside a batch came back as an error result."""

    def __init__(self, label: str, message: str):
        self.label = label
        self.message = message
        super().__init__(f"Query '{label}' failed: {message}")


class ToolCallError(BridgeError):
    """The remote orchestrator could not run the requested tool."""

    def __init__(self, tool: str, message: str):
        self.tool = tool
        self.message = message
        super().__init__(f"Tool '{tool}' failed: {message}")

class GeminiError(Exception):
    """Base class for failures talking to the Gemini endpoint."""


class ProviderError(GeminiError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class EmptyResponse(GeminiError):
    def __init__(self, message: str = "No response from AI."):
        super().__init__(message)
        self.message = message


class MalformedResponse(GeminiError):
    def __init__(self, raw_text: str, message: str = "AI returned invalid JSON"):
        super().__init__(message)
        self.message = message
        self.raw_text = raw_text

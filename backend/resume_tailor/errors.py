"""Error taxonomy shared by the services and the HTTP layer.

ValidationError subclasses map to 400 responses, UpstreamError subclasses to
500. MalformedResponseError never leaves the tailoring pipeline.
"""


class ResumeTailorError(Exception):
    """Base class for all application errors"""


class ValidationError(ResumeTailorError):
    """Bad input from the caller (missing field, bad file, bad URL)"""


class InvalidURL(ValidationError):
    pass


class UploadRejected(ValidationError):
    pass


class UpstreamError(ResumeTailorError):
    """An external call (parser, generator, job page) failed or timed out"""


class ParserError(UpstreamError):
    pass


class GeneratorError(UpstreamError):
    pass


class FetchError(UpstreamError):
    pass


class MalformedResponseError(ResumeTailorError):
    """The generator returned text where JSON was expected"""

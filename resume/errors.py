# resume/errors.py
"""
Exceptions raised by the resume ATS engine
"""


class AnalysisError(Exception):
    """Input could not be turned into an analysis; no partial result exists"""


class ResumeParseError(AnalysisError):
    """Payload is not a valid resume snapshot"""


class ResultParseError(AnalysisError):
    """Payload is not a valid ATS result"""


class ApplyError(Exception):
    """An improvement could not be applied to the resume"""


class StaleImprovementError(ApplyError):
    """Improvement targets resume content that changed since generation"""


class ImprovementNotFoundError(ApplyError, KeyError):
    """No improvement with the requested id exists in the result"""

    def __init__(self, improvement_id: str):
        super().__init__(improvement_id)
        self.improvement_id = improvement_id

    def __str__(self):
        return f"Improvement not found: {self.improvement_id}"

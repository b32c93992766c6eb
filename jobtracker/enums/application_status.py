from enum import Enum

class ApplicationStatus(Enum):
    Pending = "Pending"
    Interview = "Interview"
    Contract = "Contract"
    NegativeReply = "Negative Reply"

    @classmethod
    def values(cls):
        return [s.value for s in cls]

    @classmethod
    def label_for(cls, answer):
        """Display label for a stored answer; an empty answer is still pending."""
        answer = (answer or "").strip()
        return answer if answer else cls.Pending.value

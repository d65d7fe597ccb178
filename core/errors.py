"""
Domain errors raised by the member model, roster and codec.

Everything derives from ValueError so the dialogs can keep catching
ValueError around service calls.
"""


class GymError(ValueError):
    """Base class for all gym roster errors."""


class InvalidMember(GymError):
    """Constructor arguments do not describe a valid member."""


class DuplicateId(GymError):
    def __init__(self, member_id: int):
        super().__init__(f"Member ID {member_id} already exists!")
        self.member_id = member_id


class MemberNotFound(GymError):
    def __init__(self, member_id: int):
        super().__init__("Member not found!")
        self.member_id = member_id


class WrongMemberKind(GymError):
    """The operation only applies to the other kind of member."""


class InactiveMember(GymError):
    """Attendance can only be marked for an active membership."""


# --- Plan upgrades ---

class NotEligible(GymError):
    pass


class InvalidPlan(GymError):
    pass


# --- Payments ---

class AlreadyPaid(GymError):
    pass


class InvalidAmount(GymError):
    pass


class ExceedsDue(GymError):
    def __init__(self, remaining: float):
        super().__init__(f"Payment amount exceeds the due amount of Rs. {remaining}!")
        self.remaining = remaining


class PaymentIncomplete(GymError):
    """A discount is only granted after full payment."""


# --- Members file ---

class DecodeError(GymError):
    """A members file or one of its lines could not be read."""


class MissingHeader(DecodeError):
    """The file has no header line. Fatal for the whole decode."""


class LineTooShort(DecodeError):
    pass


class MalformedLine(DecodeError):
    pass

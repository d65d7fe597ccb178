from typing import Optional

from loguru import logger

import config
from core.errors import (
    GymError, InactiveMember, InvalidMember, MemberNotFound, PaymentIncomplete, WrongMemberKind
)
from core.utils import is_valid_date, is_valid_email, is_valid_phone
from models.member import Member, MemberKind, PremiumMember, RegularMember, UpgradeResult
from models.roster import Roster
from services.codec import MAX_MEMBER_ID

# --- LOOKUP ---

def parse_member_id(raw: Optional[str]) -> int:
    """
    Converts the text typed into an ID box into a member ID.
    Raises GymError("Invalid ID!") for anything that is not a whole number.
    """
    text = (raw or "").strip()
    try:
        return int(text)
    except ValueError:
        raise GymError("Invalid ID!") from None


def get_member(roster: Roster, member_id: int) -> Member:
    """Like Roster.find_by_id, but a missing member is an error."""
    member = roster.find_by_id(member_id)
    if member is None:
        raise MemberNotFound(member_id)
    return member


def _get_regular(roster: Roster, member_id: int) -> RegularMember:
    member = get_member(roster, member_id)
    if member.kind is not MemberKind.REGULAR:
        raise WrongMemberKind("Not a regular member!")
    return member


def _get_premium(roster: Roster, member_id: int) -> PremiumMember:
    member = get_member(roster, member_id)
    if member.kind is not MemberKind.PREMIUM:
        raise WrongMemberKind("Not a premium member!")
    return member


# --- REGISTRATION ---

def _check_id(member_id: int) -> None:
    # Longer IDs would not survive a save and reload
    if member_id > MAX_MEMBER_ID:
        raise InvalidMember(f"Member ID must be between 1 and {MAX_MEMBER_ID}!")


def _check_contact(name: str, location: str, phone: str, email: str) -> None:
    if not name.strip() or not location.strip():
        raise InvalidMember("Please fill all required fields")
    if not is_valid_email(email):
        raise InvalidMember("Invalid email format!")
    if not is_valid_phone(phone):
        raise InvalidMember("Invalid phone number format!")


def _check_dates(*dates: str) -> None:
    for d in dates:
        if not is_valid_date(d):
            raise InvalidMember(f"Invalid date: {d}")


def add_regular_member(
    roster: Roster, member_id: int, name: str, location: str, phone: str, email: str,
    gender: str, dob: str, start_date: str, referral_source: str = ""
) -> RegularMember:
    """
    Validates the form values and adds a new regular member on the basic plan.

    Raises:
        InvalidMember: ID out of range, missing field, bad email/phone or impossible date.
        DuplicateId: the ID is already in the roster.
    """
    _check_id(member_id)
    _check_contact(name, location, phone, email)
    _check_dates(dob, start_date)
    member = RegularMember(
        member_id, name.strip(), location.strip(), phone.strip(), email.strip(),
        gender, dob, start_date,
        referral_source=referral_source.strip() or config.DEFAULT_REFERRAL,
    )
    roster.add(member)
    logger.info(f"Regular member {member_id} added")
    return member


def add_premium_member(
    roster: Roster, member_id: int, name: str, location: str, phone: str, email: str,
    gender: str, dob: str, start_date: str, personal_trainer: str
) -> PremiumMember:
    """
    Validates the form values and adds a new premium member.
    A personal trainer is required.
    """
    if not personal_trainer or not personal_trainer.strip():
        raise InvalidMember("Enter all fields including trainer!")
    _check_id(member_id)
    _check_contact(name, location, phone, email)
    _check_dates(dob, start_date)
    member = PremiumMember(
        member_id, name.strip(), location.strip(), phone.strip(), email.strip(),
        gender, dob, start_date,
        personal_trainer=personal_trainer.strip(),
    )
    roster.add(member)
    logger.info(f"Premium member {member_id} added")
    return member


# --- LIFECYCLE ---

def activate_membership(roster: Roster, member_id: int) -> str:
    member = get_member(roster, member_id)
    if member.is_active:
        return "Already active!"
    member.activate()
    logger.info(f"Member {member_id} activated")
    return "Membership activated successfully!"


def deactivate_membership(roster: Roster, member_id: int) -> str:
    member = get_member(roster, member_id)
    if not member.is_active:
        return "Already inactive!"
    member.deactivate()
    logger.info(f"Member {member_id} deactivated")
    return "Membership deactivated successfully!"


def mark_attendance(roster: Roster, member_id: int) -> str:
    """
    Marks one visit for an active member.

    Returns:
        str: Confirmation, mentioning upgrade eligibility the first time a
        regular member reaches the attendance threshold.
    """
    member = get_member(roster, member_id)
    if not member.is_active:
        raise InactiveMember("Member not active!")

    was_eligible = getattr(member, "eligible_for_upgrade", False)
    member.mark_attendance()

    if member.kind is MemberKind.REGULAR and member.eligible_for_upgrade and not was_eligible:
        logger.info(f"Member {member_id} reached {member.attendance_threshold} attendances")
        return "Attendance marked successfully!\nMember is now eligible for plan upgrade!"
    return "Attendance marked successfully!"


def upgrade_plan(roster: Roster, member_id: int, plan: str) -> UpgradeResult:
    """
    Changes a regular member's plan.
    Raises NotEligible / InvalidPlan from the model unchanged.
    """
    member = _get_regular(roster, member_id)
    result = member.upgrade_plan(plan)
    if result.changed:
        logger.info(f"Member {member_id} moved to {result.plan} plan")
    return result


def revert_regular_member(roster: Roster, member_id: int, reason: Optional[str] = None) -> str:
    member = _get_regular(roster, member_id)
    reason = (reason or "").strip() or config.DEFAULT_REMOVAL_REASON
    member.revert(reason)
    logger.info(f"Regular member {member_id} reverted: {reason}")
    return "Regular member reverted successfully!"


# --- PAYMENTS ---

def pay_due(roster: Roster, member_id: int, amount: float) -> float:
    """
    Records a premium payment.

    Returns:
        float: The balance still due.
    """
    member = _get_premium(roster, member_id)
    remaining = member.pay_due(amount)
    logger.info(f"Member {member_id} paid Rs. {amount}, remaining Rs. {remaining}")
    return remaining


def calculate_discount(roster: Roster, member_id: int) -> float:
    """Recomputes and returns the discount of a fully paid premium member."""
    member = _get_premium(roster, member_id)
    if not member.is_fully_paid:
        raise PaymentIncomplete("Cannot calculate discount. Full payment not made.")
    member.calculate_discount()
    return member.discount_amount


def revert_premium_member(roster: Roster, member_id: int) -> str:
    member = _get_premium(roster, member_id)
    member.revert()
    logger.info(f"Premium member {member_id} reverted")
    return "Premium member reverted successfully!"


# --- REPORTING ---

def format_member_list(roster: Roster) -> str:
    """
    All members one after another, as shown by the 'Display' window.
    """
    if not len(roster):
        return "No members to display!"

    blocks = ["MEMBER LIST", "=" * 59, ""]
    for member in roster:
        blocks.append(member.display_info())
        blocks.append("\n" + "-" * 35 + "\n")
    return "\n".join(blocks)

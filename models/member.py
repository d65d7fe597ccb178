from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

from core.errors import (
    AlreadyPaid, ExceedsDue, InvalidAmount, InvalidMember, InvalidPlan, NotEligible
)

# Plan prices for regular members (Rs.)
PLAN_PRICES = {
    "basic": 6500.0,
    "standard": 12500.0,
    "deluxe": 18500.0,
}
DEFAULT_PLAN = "basic"

# Attendances needed before a regular member may change plan
ATTENDANCE_THRESHOLD = 30

PREMIUM_CHARGE = 50000.0
PREMIUM_DISCOUNT_RATE = 0.10
PAYMENT_EPSILON = 0.01

# Set once in the constructor, never reassigned
IDENTITY_FIELDS = frozenset({
    "id", "name", "location", "phone", "email",
    "gender", "date_of_birth", "membership_start_date",
})


class MemberKind(str, Enum):
    REGULAR = "Regular"
    PREMIUM = "Premium"


@dataclass
class Member(ABC):
    """
    Common state of a gym member.

    A member starts inactive with no attendance and no loyalty points.
    Attendance only counts while the membership is active; each kind of
    member earns its own number of loyalty points per visit.
    """
    id: int
    name: str
    location: str
    phone: str
    email: str
    gender: str
    date_of_birth: str          # YYYY-MM-DD
    membership_start_date: str  # YYYY-MM-DD
    attendance: int = field(default=0, init=False)
    loyalty_points: float = field(default=0.0, init=False)
    is_active: bool = field(default=False, init=False)

    kind: ClassVar[MemberKind]
    loyalty_increment: ClassVar[float]

    def __post_init__(self) -> None:
        if isinstance(self.id, bool) or not isinstance(self.id, int) or self.id <= 0:
            raise InvalidMember("ID must be positive")
        if not self.name or not self.name.strip():
            raise InvalidMember("Name cannot be empty")
        if not self.phone or not self.phone.strip():
            raise InvalidMember("Phone cannot be empty")
        if not self.email or not self.email.strip():
            raise InvalidMember("Email cannot be empty")

    def __setattr__(self, name, value) -> None:
        if name in IDENTITY_FIELDS and name in self.__dict__:
            raise AttributeError(f"'{name}' cannot be changed after the member is created")
        super().__setattr__(name, value)

    # --- LIFECYCLE ---

    def activate(self) -> None:
        """Inactive -> Active. Does nothing if already active."""
        self.is_active = True

    def deactivate(self) -> None:
        """Active -> Inactive. Does nothing if already inactive."""
        if self.is_active:
            self.is_active = False

    def mark_attendance(self) -> None:
        """Counts a visit and adds loyalty points. Ignored while inactive."""
        self.add_visits(1)

    def add_visits(self, count: int) -> None:
        """
        Same result as calling mark_attendance() `count` times, in one step.
        Ignored while inactive.
        """
        if not self.is_active or count <= 0:
            return
        self.attendance += count
        self.loyalty_points += self.loyalty_increment * count

    def reset(self) -> None:
        """Common first step of a revert: inactive, no attendance, no points."""
        self.is_active = False
        self.attendance = 0
        self.loyalty_points = 0.0

    @abstractmethod
    def revert(self, *args) -> None:
        ...

    # --- DISPLAY ---

    @property
    def status_label(self) -> str:
        return "Active" if self.is_active else "Inactive"

    def display_info(self) -> str:
        return (
            f"Member ID: {self.id}\n"
            f"Name: {self.name}\n"
            f"Location: {self.location}\n"
            f"Phone: {self.phone}\n"
            f"Email: {self.email}\n"
            f"Gender: {self.gender}\n"
            f"Date of Birth: {self.date_of_birth}\n"
            f"Membership Start Date: {self.membership_start_date}\n"
            f"Attendance: {self.attendance}\n"
            f"Loyalty Points: {self.loyalty_points}\n"
            f"Active Status: {self.status_label}"
        )


@dataclass
class UpgradeResult:
    """Outcome of RegularMember.upgrade_plan. `changed` is False when the plan was already selected."""
    changed: bool
    plan: str
    price: float

    @property
    def message(self) -> str:
        if not self.changed:
            return f"You are already on the {self.plan} plan."
        return f"Plan upgraded successfully to {self.plan} for Rs. {self.price}"


@dataclass
class RegularMember(Member):
    """
    Member paying for one of the basic / standard / deluxe plans.
    Becomes eligible to change plan after ATTENDANCE_THRESHOLD visits, and
    stays eligible until reverted.
    """
    referral_source: str = ""
    plan: str = field(default=DEFAULT_PLAN, init=False)
    price: float = field(default=PLAN_PRICES[DEFAULT_PLAN], init=False)
    attendance_threshold: int = field(default=ATTENDANCE_THRESHOLD, init=False)
    eligible_for_upgrade: bool = field(default=False, init=False)
    removal_reason: str = field(default="", init=False)

    kind: ClassVar[MemberKind] = MemberKind.REGULAR
    loyalty_increment: ClassVar[float] = 5.0

    def add_visits(self, count: int) -> None:
        super().add_visits(count)
        if self.attendance >= self.attendance_threshold and not self.eligible_for_upgrade:
            self.eligible_for_upgrade = True

    def upgrade_plan(self, target_plan: str) -> UpgradeResult:
        """
        Moves the member to another plan.

        Raises:
            NotEligible: attendance threshold not reached yet.
            InvalidPlan: target is not basic, standard or deluxe.
        """
        if not self.eligible_for_upgrade:
            raise NotEligible(
                f"Not eligible for upgrade. Need at least {self.attendance_threshold} attendances."
            )

        plan = (target_plan or "").strip().lower()
        if plan not in PLAN_PRICES:
            raise InvalidPlan("Invalid plan selected. Choose basic, standard, or deluxe.")

        if plan == self.plan:
            return UpgradeResult(changed=False, plan=self.plan, price=self.price)

        self.plan = plan
        self.price = PLAN_PRICES[plan]
        return UpgradeResult(changed=True, plan=self.plan, price=self.price)

    def revert(self, reason: str = "") -> None:
        self.reset()
        self.plan = DEFAULT_PLAN
        self.price = PLAN_PRICES[DEFAULT_PLAN]
        self.eligible_for_upgrade = False
        self.removal_reason = reason

    def display_info(self) -> str:
        lines = [
            super().display_info(),
            "Membership Type: Regular",
            f"Plan: {self.plan}",
            f"Price: Rs. {self.price}",
            f"Referral Source: {self.referral_source}",
            f"Attendance Limit: {self.attendance_threshold}",
            f"Eligible for Upgrade: {'Yes' if self.eligible_for_upgrade else 'No'}",
        ]
        if self.removal_reason:
            lines.append(f"Removal Reason: {self.removal_reason}")
        return "\n".join(lines)


@dataclass
class PremiumMember(Member):
    """
    Member paying the fixed premium charge, possibly in instalments.
    Paying the full charge grants a 10% discount.
    """
    personal_trainer: str = ""
    premium_charge: float = field(default=PREMIUM_CHARGE, init=False)
    paid_amount: float = field(default=0.0, init=False)
    is_fully_paid: bool = field(default=False, init=False)
    discount_amount: float = field(default=0.0, init=False)

    kind: ClassVar[MemberKind] = MemberKind.PREMIUM
    loyalty_increment: ClassVar[float] = 10.0

    @property
    def remaining_due(self) -> float:
        return self.premium_charge - self.paid_amount

    def pay_due(self, amount: float) -> float:
        """
        Records a payment and returns the remaining balance.
        A payment larger than the balance is rejected as a whole.

        Raises:
            AlreadyPaid, InvalidAmount, ExceedsDue
        """
        if self.is_fully_paid:
            raise AlreadyPaid("Payment is already complete!")

        # `not amount > 0` also rejects NaN
        if not amount > 0:
            raise InvalidAmount("Invalid payment amount!")

        if amount > self.remaining_due:
            raise ExceedsDue(self.remaining_due)

        self.paid_amount += amount

        if abs(self.paid_amount - self.premium_charge) < PAYMENT_EPSILON:
            self.is_fully_paid = True
            self.calculate_discount()

        return self.remaining_due

    def calculate_discount(self) -> None:
        """Sets the full-payment discount. No-op until fully paid."""
        if self.is_fully_paid:
            self.discount_amount = self.premium_charge * PREMIUM_DISCOUNT_RATE

    def revert(self) -> None:
        self.reset()
        self.personal_trainer = ""
        self.is_fully_paid = False
        self.paid_amount = 0.0
        self.discount_amount = 0.0

    def display_info(self) -> str:
        lines = [
            super().display_info(),
            "Membership Type: Premium",
            f"Premium Charge: Rs. {self.premium_charge}",
            f"Personal Trainer: {self.personal_trainer}",
            f"Paid Amount: Rs. {self.paid_amount}",
            f"Payment Status: {'Complete' if self.is_fully_paid else 'Incomplete'}",
        ]
        if self.is_fully_paid:
            lines.append(f"Discount Amount: Rs. {self.discount_amount}")
        lines.append(f"Remaining Amount: Rs. {self.remaining_due}")
        return "\n".join(lines)

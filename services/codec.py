"""
Fixed-width text format of the members file.

One header line, then one line per member. Every column has a fixed width
and the columns are written back to back, so each field sits at a fixed
character offset:

    ID(5) Name(15) Location(15) Phone(15) Email(25) Start Date(20) Plan(10)
    Price(10) Attendance(10) Loyalty Points(15) Active Status(10)
    Full Payment(15) Discount Amount(15) Net Amount Paid(15)

Reading is tolerant: a bad line is skipped and reported, the rest of the
file still loads. Only a missing header stops the whole decode.
"""

import re
from dataclasses import dataclass, field
from typing import List, NamedTuple, Tuple

from loguru import logger

from core.errors import DuplicateId, GymError, LineTooShort, MalformedLine, MissingHeader
from models.member import (
    ATTENDANCE_THRESHOLD, DEFAULT_PLAN, PLAN_PRICES, Member, MemberKind, PremiumMember, RegularMember
)
from models.roster import Roster


class Column(NamedTuple):
    key: str
    label: str
    width: int


COLUMNS: Tuple[Column, ...] = (
    Column("id", "ID", 5),
    Column("name", "Name", 15),
    Column("location", "Location", 15),
    Column("phone", "Phone", 15),
    Column("email", "Email", 25),
    Column("start_date", "Membership Start Date", 20),
    Column("plan", "Plan", 10),
    Column("price", "Price", 10),
    Column("attendance", "Attendance", 10),
    Column("loyalty_points", "Loyalty Points", 15),
    Column("active", "Active Status", 10),
    Column("full_payment", "Full Payment", 15),
    Column("discount", "Discount Amount", 15),
    Column("net_paid", "Net Amount Paid", 15),
)


def _offsets() -> dict:
    spans, start = {}, 0
    for col in COLUMNS:
        spans[col.key] = (start, start + col.width)
        start += col.width
    return spans


# key -> (start, end) character offsets
SPANS = _offsets()
LINE_WIDTH = sum(col.width for col in COLUMNS)

# Shorter lines are not parsed at all
MIN_LINE_LENGTH = 100
# Optional columns are only read when the line reaches their end
ATTENDANCE_MIN_LENGTH = SPANS["attendance"][1]      # 125
LOYALTY_MIN_LENGTH = SPANS["loyalty_points"][1]     # 140
ACTIVE_MIN_LENGTH = SPANS["active"][1]              # 150

PREMIUM_PLAN_LABEL = "Premium"
NOT_APPLICABLE = "N/A"
ACTIVE_LABEL = "Active"

# Values that are not stored in the file
DEFAULT_GENDER = "Male"
DEFAULT_DOB = "1990-01-01"
DEFAULT_TRAINER = "Default Trainer"
DEFAULT_REFERRAL = "Default"

# Larger attendance values are treated as unreadable
MAX_ATTENDANCE = 2**31 - 1

_ID_PATTERN = re.compile(r"[+-]?[0-9]+")
_NON_DIGITS = re.compile(r"[^0-9]")

# Largest member ID that fits the ID column
MAX_MEMBER_ID = 10 ** COLUMNS[0].width - 1


# --- ENCODING ---

def _cell(value, width: int) -> str:
    text = str(value).replace("\r", " ").replace("\n", " ")
    if len(text) > width:
        logger.warning(f"Value {text!r} truncated to {width} characters")
        text = text[:width]
    return text.ljust(width)


def _join(values) -> str:
    return "".join(_cell(v, col.width) for v, col in zip(values, COLUMNS))


def header_line() -> str:
    """Column labels laid out on the same grid as the member lines."""
    return _join(col.label[:col.width] for col in COLUMNS)


def encode_member(member: Member) -> str:
    """Formats one member as a fixed-width line (no newline)."""
    full_payment = discount = net_paid = NOT_APPLICABLE

    if member.kind is MemberKind.PREMIUM:
        plan = PREMIUM_PLAN_LABEL
        price = str(member.premium_charge)
        full_payment = "Yes" if member.is_fully_paid else "No"
        discount = str(member.discount_amount)
        net_paid = str(member.paid_amount)
    else:
        plan = member.plan
        price = str(member.price)

    return _join((
        member.id,
        member.name,
        member.location,
        member.phone,
        member.email,
        member.membership_start_date,
        plan,
        price,
        member.attendance,
        f"{member.loyalty_points:.2f}",
        member.status_label,
        full_payment,
        discount,
        net_paid,
    ))


def encode_roster(roster: Roster) -> str:
    """Header plus one line per member, each ending with a newline."""
    lines = [header_line()]
    lines.extend(encode_member(m) for m in roster)
    return "\n".join(lines) + "\n"


# --- DECODING ---

@dataclass
class MemberRecord:
    """The columns of one member line, as read from the file."""
    id: int
    name: str
    location: str
    phone: str
    email: str
    start_date: str
    plan: str
    attendance: int = 0
    loyalty_points: float = 0.0
    is_active: bool = False

    @property
    def is_premium(self) -> bool:
        return self.plan.lower() == PREMIUM_PLAN_LABEL.lower()


@dataclass
class SkippedLine:
    line_no: int
    line: str
    reason: str


@dataclass
class DecodeReport:
    header: str
    preview: str
    members: List[Member] = field(default_factory=list)
    skipped: List[SkippedLine] = field(default_factory=list)

    @property
    def loaded(self) -> int:
        return len(self.members)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)


def _slice(line: str, key: str) -> str:
    start, end = SPANS[key]
    return line[start:end].strip()


def _parse_attendance(line: str) -> int:
    raw = _slice(line, "attendance")
    digits = _NON_DIGITS.sub("", raw)
    if not digits:
        return 0
    value = int(digits)
    if value > MAX_ATTENDANCE:
        logger.debug(f"Attendance {raw!r} out of range, using 0")
        return 0
    return value


def _parse_loyalty(line: str) -> float:
    raw = _slice(line, "loyalty_points")
    try:
        return float(raw)
    except ValueError:
        logger.debug(f"Error parsing loyalty points: {raw!r}, using 0.0")
        return 0.0


def parse_line(line: str) -> MemberRecord:
    """
    Reads the columns of one member line.

    Raises:
        LineTooShort: fewer than MIN_LINE_LENGTH characters.
        MalformedLine: the ID column is not a whole number.
    """
    if len(line) < MIN_LINE_LENGTH:
        raise LineTooShort(f"Line too short ({len(line)} < {MIN_LINE_LENGTH} characters)")

    raw_id = _slice(line, "id")
    if not _ID_PATTERN.fullmatch(raw_id):
        raise MalformedLine(f"Invalid member ID: {raw_id!r}")

    record = MemberRecord(
        id=int(raw_id),
        name=_slice(line, "name"),
        location=_slice(line, "location"),
        phone=_slice(line, "phone"),
        email=_slice(line, "email"),
        start_date=_slice(line, "start_date"),
        plan=_slice(line, "plan"),
    )

    if len(line) >= ATTENDANCE_MIN_LENGTH:
        record.attendance = _parse_attendance(line)

    if len(line) >= LOYALTY_MIN_LENGTH:
        record.loyalty_points = _parse_loyalty(line)

    if len(line) >= ACTIVE_MIN_LENGTH:
        record.is_active = _slice(line, "active") == ACTIVE_LABEL

    return record


def build_member(record: MemberRecord) -> Member:
    """
    Rebuilds a live member from a record by driving its state machine, so
    attendance, loyalty points and eligibility come out exactly as if the
    visits had been marked by hand. Fields the file does not keep get
    fixed placeholder values.

    Raises:
        InvalidMember: the record's ID, name, phone or email is unusable.
    """
    if record.is_premium:
        member = PremiumMember(
            record.id, record.name, record.location, record.phone, record.email,
            DEFAULT_GENDER, DEFAULT_DOB, record.start_date,
            personal_trainer=DEFAULT_TRAINER,
        )
        if record.is_active:
            member.activate()
        member.add_visits(record.attendance)
        return member

    member = RegularMember(
        record.id, record.name, record.location, record.phone, record.email,
        DEFAULT_GENDER, DEFAULT_DOB, record.start_date,
        referral_source=DEFAULT_REFERRAL,
    )

    plan = record.plan.lower()
    if plan != DEFAULT_PLAN:
        if plan in PLAN_PRICES:
            # Reach eligibility, switch plan, then start counting again
            member.activate()
            member.add_visits(ATTENDANCE_THRESHOLD)
            member.upgrade_plan(plan)
            member.reset()
        else:
            logger.warning(f"Member {record.id}: unknown plan {record.plan!r}, keeping {DEFAULT_PLAN}")

    if record.is_active:
        member.activate()
    member.add_visits(record.attendance)
    return member


def _split_lines(text: str) -> List[str]:
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def decode(text: str) -> DecodeReport:
    """
    Parses a whole members file. Does not touch any roster.

    Raises:
        MissingHeader: the text is empty or starts with a blank line.
    """
    lines = _split_lines(text)
    header = lines[0] if lines else ""
    if not header.strip():
        raise MissingHeader("File is empty!")

    report = DecodeReport(header=header, preview="")
    preview = [header]
    seen_ids = set()

    for line_no, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        preview.append(line)

        try:
            member = build_member(parse_line(line))
            if member.id in seen_ids:
                raise DuplicateId(member.id)
        except GymError as e:
            logger.warning(f"Skipping line {line_no}: {e}")
            report.skipped.append(SkippedLine(line_no, line, str(e)))
            continue

        seen_ids.add(member.id)
        report.members.append(member)

    report.preview = "\n".join(preview)
    logger.info(f"Decoded {report.loaded} members, skipped {report.skipped_count} lines")
    return report


def decode_roster(text: str, roster: Roster) -> DecodeReport:
    """Decodes `text` and replaces the roster's content with the result."""
    report = decode(text)
    roster.replace(report.members)
    return report

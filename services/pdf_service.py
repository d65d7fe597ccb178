from pathlib import Path
from typing import List, Optional, Tuple

from loguru import logger
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

import config
from core.utils import format_currency
from models.member import Member, MemberKind
from services.file_manager import ensure_folder


def member_card_fields(member: Member) -> List[Tuple[str, str]]:
    """
    The (label, value) rows printed on a member card, common fields first.
    """
    rows = [
        ("ID", str(member.id)),
        ("Name", member.name),
        ("Location", member.location),
        ("Phone", member.phone),
        ("Email", member.email),
        ("Gender", member.gender),
        ("Date of Birth", member.date_of_birth),
        ("Start Date", member.membership_start_date),
        ("Status", member.status_label),
        ("Attendance", str(member.attendance)),
        ("Loyalty Points", f"{member.loyalty_points:.2f}"),
    ]

    if member.kind is MemberKind.PREMIUM:
        rows += [
            ("Membership", "Premium"),
            ("Personal Trainer", member.personal_trainer or "N/A"),
            ("Premium Charge", format_currency(member.premium_charge)),
            ("Paid", format_currency(member.paid_amount)),
            ("Remaining", format_currency(member.remaining_due)),
            ("Discount", format_currency(member.discount_amount)),
        ]
    else:
        rows += [
            ("Membership", "Regular"),
            ("Plan", member.plan.title()),
            ("Price", format_currency(member.price)),
            ("Referral", member.referral_source or "N/A"),
            ("Upgrade Eligible", "Yes" if member.eligible_for_upgrade else "No"),
        ]
        if member.removal_reason:
            rows.append(("Removal Reason", member.removal_reason))

    return rows


def create_member_pdf(member: Member, save_path: Optional[Path] = None) -> str:
    """
    Generates a one-page PDF card for a gym member.

    Args:
        member (Member): The member to print.
        save_path (Path, optional): Defaults to Exports/<id>.pdf in the data folder.

    Returns:
        str: The path of the saved PDF.
    """
    if save_path is None:
        if config.EXPORT_FOLDER is None:
            raise RuntimeError("Data folder is not set up (call init_paths first)")
        save_path = Path(config.EXPORT_FOLDER) / f"member_{member.id}.pdf"

    save_path = Path(save_path)
    ensure_folder(save_path.parent)

    c = canvas.Canvas(str(save_path), pagesize=A4)
    _, h = A4
    y = h - 50

    # --- HEADER ---
    c.setFont("Helvetica-Bold", 18)
    c.setFillColorRGB(0.11, 0.22, 0.34)
    c.drawString(60, y, f"{config.APP_TITLE} - Member {member.id}")

    y -= 30
    c.setFont("Helvetica", 12)
    c.setFillColorRGB(0, 0, 0)

    # --- BODY FIELDS ---
    for label, value in member_card_fields(member):
        c.drawString(60, y, f"{label}: {value}")
        y -= 18

    c.save()
    logger.info(f"Member card exported: {save_path}")
    return str(save_path)

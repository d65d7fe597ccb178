import datetime
from typing import Callable, Optional

from loguru import logger
from PySide6 import QtWidgets, QtCore

import config
from core.errors import GymError
from core.utils import format_currency, format_date, month_name
from models.member import PLAN_PRICES, PREMIUM_CHARGE, PREMIUM_DISCOUNT_RATE, MemberKind
from models.roster import Roster
from services import member_service
from services.codec import decode_roster, encode_roster
from services.pdf_service import create_member_pdf

# Workers
from workers.load_worker import LoadWorker
from workers.save_worker import SaveWorker

# Dialogs
from ui.dialogs.text_view_dialog import TextViewDialog

TABLE_COLUMNS = ["ID", "Name", "Type", "Plan", "Status", "Attendance", "Loyalty", "Paid"]


class MemberDashboard(QtWidgets.QMainWindow):
    """
    The single window of the application.
    Left: the member form. Right: the roster table. Bottom: one button per action.
    All roster changes go through services.member_service on this thread.
    """
    roster_changed = QtCore.Signal()

    def __init__(self, roster: Roster):
        super().__init__()
        self.roster = roster
        self.setWindowTitle(config.APP_TITLE)
        self.resize(1300, 820)

        # ThreadPool for file reads/writes
        self.pool = QtCore.QThreadPool()
        self.pool.setMaxThreadCount(1)

        self.init_ui()
        self.apply_style()
        self.roster_changed.connect(self.refresh_table)
        self.refresh_table()

    def init_ui(self) -> None:
        cw = QtWidgets.QWidget()
        self.setCentralWidget(cw)
        layout = QtWidgets.QVBoxLayout(cw)

        header = QtWidgets.QLabel(config.APP_TITLE)
        header.setAlignment(QtCore.Qt.AlignCenter)
        header.setStyleSheet("font-size: 18px; font-weight: bold; color: white; background: #1c3957; padding: 10px;")
        layout.addWidget(header)

        body = QtWidgets.QHBoxLayout()
        body.addWidget(self.init_form(), 1)
        body.addWidget(self.init_table(), 1)
        layout.addLayout(body, 1)

        layout.addLayout(self.init_buttons())

    # --- FORM ---
    def init_form(self) -> QtWidgets.QWidget:
        box = QtWidgets.QWidget()
        col = QtWidgets.QVBoxLayout(box)

        personal = QtWidgets.QGroupBox("Personal Information")
        form = QtWidgets.QFormLayout(personal)

        self.inp_id = QtWidgets.QLineEdit()
        self.inp_id.setPlaceholderText("Enter Member ID")
        self.inp_name = QtWidgets.QLineEdit()
        self.inp_name.setPlaceholderText("Enter Full Name")
        self.inp_location = QtWidgets.QLineEdit()
        self.inp_location.setPlaceholderText("Enter Location")
        self.inp_phone = QtWidgets.QLineEdit()
        self.inp_phone.setPlaceholderText("Enter Phone Number")
        self.inp_email = QtWidgets.QLineEdit()
        self.inp_email.setPlaceholderText("Enter Email")

        self.rb_male = QtWidgets.QRadioButton("Male")
        self.rb_female = QtWidgets.QRadioButton("Female")
        self.rb_male.setChecked(True)
        gH = QtWidgets.QHBoxLayout()
        gH.addWidget(self.rb_male)
        gH.addWidget(self.rb_female)
        gH.addStretch()

        form.addRow("ID*", self.inp_id)
        form.addRow("Name*", self.inp_name)
        form.addRow("Location*", self.inp_location)
        form.addRow("Phone*", self.inp_phone)
        form.addRow("Email*", self.inp_email)
        form.addRow("Gender", gH)

        this_year = datetime.date.today().year
        self.dob = self._date_selector(range(1950, this_year + 1), this_year - 25)
        self.start = self._date_selector(range(this_year - 5, this_year + 2), this_year)
        form.addRow("Date of Birth", self.dob["layout"])
        form.addRow("Start Date", self.start["layout"])
        col.addWidget(personal)

        extra = QtWidgets.QGroupBox("Membership")
        form2 = QtWidgets.QFormLayout(extra)

        self.inp_referral = QtWidgets.QLineEdit()
        self.inp_referral.setPlaceholderText("Enter Referral Code")
        self.inp_trainer = QtWidgets.QLineEdit()
        self.inp_trainer.setPlaceholderText("Enter Trainer Name")
        self.inp_reason = QtWidgets.QLineEdit()
        self.inp_reason.setPlaceholderText("Enter Removal Reason")

        self.cb_plan = QtWidgets.QComboBox()
        self.cb_plan.addItems([p.title() for p in PLAN_PRICES])
        self.lbl_price = QtWidgets.QLabel()
        self.cb_plan.currentTextChanged.connect(self.update_price_label)
        self.update_price_label(self.cb_plan.currentText())

        lbl_charge = QtWidgets.QLabel(format_currency(PREMIUM_CHARGE))
        lbl_discount = QtWidgets.QLabel(format_currency(PREMIUM_CHARGE * PREMIUM_DISCOUNT_RATE))

        form2.addRow("Referral Source", self.inp_referral)
        form2.addRow("Plan (preview)", self.cb_plan)
        form2.addRow("Plan Price", self.lbl_price)
        form2.addRow("Personal Trainer", self.inp_trainer)
        form2.addRow("Premium Charge", lbl_charge)
        form2.addRow("Full Payment Discount", lbl_discount)
        form2.addRow("Removal Reason", self.inp_reason)
        col.addWidget(extra)
        col.addStretch()
        return box

    def _date_selector(self, years, default_year: int) -> dict:
        yy = QtWidgets.QComboBox()
        yy.addItems([str(y) for y in years])
        yy.setCurrentText(str(default_year))

        mm = QtWidgets.QComboBox()
        mm.addItems([month_name(m) for m in range(1, 13)])

        dd = QtWidgets.QComboBox()
        dd.addItems([f"{d:02d}" for d in range(1, 32)])

        h = QtWidgets.QHBoxLayout()
        h.addWidget(yy)
        h.addWidget(mm)
        h.addWidget(dd)
        return {"year": yy, "month": mm, "day": dd, "layout": h}

    def _selected_date(self, sel: dict) -> str:
        return format_date(
            sel["year"].currentText() or None,
            sel["month"].currentIndex() + 1,
            sel["day"].currentText() or None,
        )

    def update_price_label(self, plan: str) -> None:
        self.lbl_price.setText(format_currency(PLAN_PRICES.get(plan.lower(), 0.0)))

    # --- TABLE ---
    def init_table(self) -> QtWidgets.QWidget:
        box = QtWidgets.QGroupBox("Members")
        v = QtWidgets.QVBoxLayout(box)
        self.table = QtWidgets.QTableWidget()
        self.table.setColumnCount(len(TABLE_COLUMNS))
        self.table.setHorizontalHeaderLabels(TABLE_COLUMNS)
        self.table.horizontalHeader().setSectionResizeMode(QtWidgets.QHeaderView.Stretch)
        self.table.setEditTriggers(QtWidgets.QAbstractItemView.NoEditTriggers)
        self.table.setSelectionBehavior(QtWidgets.QAbstractItemView.SelectRows)
        self.table.itemSelectionChanged.connect(self.on_row_selected)
        v.addWidget(self.table)
        return box

    def refresh_table(self) -> None:
        members = self.roster.all()
        self.table.setRowCount(len(members))
        for i, m in enumerate(members):
            if m.kind is MemberKind.PREMIUM:
                plan, paid = "Premium", format_currency(m.paid_amount)
            else:
                plan, paid = m.plan.title(), "N/A"
            cells = [
                str(m.id), m.name, m.kind.value, plan, m.status_label,
                str(m.attendance), f"{m.loyalty_points:.2f}", paid,
            ]
            for j, text in enumerate(cells):
                self.table.setItem(i, j, QtWidgets.QTableWidgetItem(text))

    def on_row_selected(self) -> None:
        rows = self.table.selectionModel().selectedRows()
        if rows:
            self.inp_id.setText(self.table.item(rows[0].row(), 0).text())

    # --- BUTTONS ---
    def init_buttons(self) -> QtWidgets.QGridLayout:
        grid = QtWidgets.QGridLayout()
        actions = [
            ("Add Regular", self.add_regular, "#1c3957"),
            ("Add Premium", self.add_premium, "#1c3957"),
            ("Activate", self.activate, "#2a5448"),
            ("Deactivate", self.deactivate, "#962828"),
            ("Mark Attendance", self.mark_attendance, "#2a5448"),
            ("Upgrade Plan", self.upgrade_plan, "#1c3957"),
            ("Calculate Discount", self.calculate_discount, "#1c3957"),
            ("Pay Due", self.pay_due, "#2a5448"),
            ("Revert Regular", self.revert_regular, "#962828"),
            ("Revert Premium", self.revert_premium, "#962828"),
            ("Display", self.display_members, "#1c3957"),
            ("Clear", self.clear_fields, "#555"),
            ("Save to file", self.save_to_file, "#1c3957"),
            ("Read from file", self.read_from_file, "#2a5448"),
            ("Export Card", self.export_card, "#555"),
        ]
        for i, (text, slot, color) in enumerate(actions):
            b = QtWidgets.QPushButton(text)
            b.setMinimumHeight(38)
            b.setCursor(QtCore.Qt.PointingHandCursor)
            b.setStyleSheet(f"background: {color};")
            b.clicked.connect(slot)
            grid.addWidget(b, i // 5, i % 5)
        return grid

    # --- HELPERS ---
    def _info(self, text: str, title: str = "Success") -> None:
        QtWidgets.QMessageBox.information(self, title, text)

    def _error(self, text: str) -> None:
        QtWidgets.QMessageBox.critical(self, "Error", text)

    def _ask_id(self, prompt: str) -> Optional[int]:
        """ID from the form if filled in, otherwise asked for. None if cancelled or invalid."""
        raw = self.inp_id.text().strip()
        if not raw:
            raw, ok = QtWidgets.QInputDialog.getText(self, config.APP_TITLE, prompt)
            if not ok or not raw.strip():
                return None
        try:
            return member_service.parse_member_id(raw)
        except GymError as e:
            self._error(str(e))
            return None

    def _run(self, action: Callable[[], Optional[str]]) -> None:
        """Runs a service call, shows its message or error and refreshes the table."""
        try:
            msg = action()
        except GymError as e:
            self._error(str(e))
            return
        if msg:
            self._info(msg)
        self.roster_changed.emit()

    # --- ACTIONS ---
    def _form_values(self) -> dict:
        return dict(
            name=self.inp_name.text(),
            location=self.inp_location.text(),
            phone=self.inp_phone.text(),
            email=self.inp_email.text(),
            gender="Male" if self.rb_male.isChecked() else "Female",
            dob=self._selected_date(self.dob),
            start_date=self._selected_date(self.start),
        )

    def add_regular(self) -> None:
        def action():
            mid = member_service.parse_member_id(self.inp_id.text())
            member_service.add_regular_member(
                self.roster, mid, referral_source=self.inp_referral.text(), **self._form_values()
            )
            self.clear_fields()
            return "Regular member added successfully!"
        self._run(action)

    def add_premium(self) -> None:
        def action():
            mid = member_service.parse_member_id(self.inp_id.text())
            member_service.add_premium_member(
                self.roster, mid, personal_trainer=self.inp_trainer.text(), **self._form_values()
            )
            self.clear_fields()
            return "Premium member added successfully!"
        self._run(action)

    def activate(self) -> None:
        mid = self._ask_id("Enter Member ID to activate:")
        if mid is not None:
            self._run(lambda: member_service.activate_membership(self.roster, mid))

    def deactivate(self) -> None:
        mid = self._ask_id("Enter Member ID to deactivate:")
        if mid is not None:
            self._run(lambda: member_service.deactivate_membership(self.roster, mid))

    def mark_attendance(self) -> None:
        mid = self._ask_id("Enter Member ID to mark attendance:")
        if mid is not None:
            self._run(lambda: member_service.mark_attendance(self.roster, mid))

    def upgrade_plan(self) -> None:
        mid = self._ask_id("Enter Member ID to upgrade plan:")
        if mid is None:
            return
        plans = [p.title() for p in PLAN_PRICES]
        plan, ok = QtWidgets.QInputDialog.getItem(self, "Upgrade Plan", "Select new plan:", plans, 0, False)
        if ok:
            self._run(lambda: member_service.upgrade_plan(self.roster, mid, plan).message)

    def calculate_discount(self) -> None:
        mid = self._ask_id("Enter Member ID to calculate discount:")
        if mid is not None:
            self._run(lambda: f"Discount calculated: Rs. {member_service.calculate_discount(self.roster, mid)}")

    def pay_due(self) -> None:
        mid = self._ask_id("Enter Member ID to pay due amount:")
        if mid is None:
            return
        try:
            member = member_service.get_member(self.roster, mid)
        except GymError as e:
            self._error(str(e))
            return
        if member.kind is not MemberKind.PREMIUM:
            self._error("Not a premium member!")
            return

        amount, ok = QtWidgets.QInputDialog.getDouble(
            self, "Payment", f"Enter amount to pay (Remaining: Rs. {member.remaining_due}):",
            member.remaining_due, 0.0, member.premium_charge, 2
        )
        if ok:
            self._run(lambda: f"Payment successful! Remaining amount: Rs. {member_service.pay_due(self.roster, mid, amount)}")

    def revert_regular(self) -> None:
        mid = self._ask_id("Enter Member ID to revert (Regular):")
        if mid is not None:
            self._run(lambda: member_service.revert_regular_member(self.roster, mid, self.inp_reason.text()))

    def revert_premium(self) -> None:
        mid = self._ask_id("Enter Member ID to revert (Premium):")
        if mid is not None:
            self._run(lambda: member_service.revert_premium_member(self.roster, mid))

    def display_members(self) -> None:
        if not len(self.roster):
            self._error("No members to display!")
            return
        TextViewDialog(
            f"Member Details - Total: {len(self.roster)}",
            member_service.format_member_list(self.roster), self
        ).exec()

    def export_card(self) -> None:
        mid = self._ask_id("Enter Member ID to export:")
        if mid is None:
            return
        try:
            member = member_service.get_member(self.roster, mid)
            path = create_member_pdf(member)
        except GymError as e:
            self._error(str(e))
            return
        except OSError as e:
            self._error(f"Could not write PDF: {e}")
            return
        self._info(f"Saved: {path}")

    def clear_fields(self) -> None:
        for w in (self.inp_id, self.inp_name, self.inp_location, self.inp_phone, self.inp_email,
                  self.inp_referral, self.inp_trainer, self.inp_reason):
            w.clear()
        self.rb_male.setChecked(True)
        self.cb_plan.setCurrentIndex(0)

    # --- FILE ---
    def save_to_file(self) -> None:
        if not len(self.roster):
            self._error("No members to save!")
            return
        w = SaveWorker(encode_roster(self.roster))
        w.signals.finished.connect(lambda path: self._info(f"Member details saved to file successfully!\n{path}"))
        w.signals.error.connect(self._error)
        self.pool.start(w)

    def read_from_file(self) -> None:
        w = LoadWorker()
        w.signals.finished.connect(self._loaded)
        w.signals.error.connect(self._error)
        self.pool.start(w)

    def _loaded(self, text: str) -> None:
        try:
            report = decode_roster(text, self.roster)
        except GymError as e:
            self._error(str(e))
            return

        self.roster_changed.emit()
        if not report.loaded:
            self._info("No valid members found in file!", "Information")
            return

        msg = f"{report.loaded} members imported from file successfully!"
        if report.skipped_count:
            msg += f"\n{report.skipped_count} lines could not be read."
            logger.warning(f"{report.skipped_count} unreadable lines in members file")
        self._info(msg)
        TextViewDialog("Member Details from File", report.preview, self).exec()

    def apply_style(self) -> None:
        self.setStyleSheet("""
            QMainWindow { background: #f0f2f5; }
            QGroupBox { border: 1px solid #3a5a74; margin-top: 10px; padding-top: 15px; font-weight: bold; color: #3a5a74; }
            QGroupBox::title { subcontrol-origin: margin; left: 10px; padding: 0 5px; }
            QLabel { color: #212529; }
            QLineEdit, QComboBox { background: #f8f9fa; color: #212529; border: 1px solid #ced4da; padding: 5px; }
            QPushButton { color: white; border-radius: 4px; font-weight: bold; }
            QTableWidget { background: white; gridline-color: #ced4da; }
        """)

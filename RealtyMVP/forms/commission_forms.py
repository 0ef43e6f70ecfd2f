# RealtyMVP/forms/commission_forms.py
from wtforms import TextAreaField, DecimalField, SelectField, SubmitField, DateField
from wtforms.validators import DataRequired, Optional, Length, NumberRange

from RealtyMVP.forms.base import EntityForm
from RealtyMVP.models.choices import DEAL_TYPES, COMMISSION_STATUSES, as_choices
from RealtyMVP.services.portfolio_calcs import compute_commission_amount


# 💰 Commission create / edit
class CommissionForm(EntityForm):
    entity_fields = (
        "property_id", "client_id", "deal_type", "deal_value", "commission_rate",
        "commission_amount", "status", "closing_date", "payment_date", "notes",
    )

    property_id = SelectField("Property", choices=[], default="")
    client_id = SelectField("Client", choices=[], default="")
    deal_type = SelectField("Deal Type", choices=as_choices(DEAL_TYPES), default="sale")
    deal_value = DecimalField("Deal Value ($)", validators=[DataRequired(), NumberRange(min=0)])
    commission_rate = DecimalField("Commission Rate (%)", default=3, validators=[DataRequired(), NumberRange(min=0, max=100)])
    commission_amount = DecimalField("Commission Amount ($)", validators=[Optional(), NumberRange(min=0)])
    status = SelectField("Status", choices=as_choices(COMMISSION_STATUSES), default="pending")
    closing_date = DateField("Closing Date", validators=[Optional()])
    payment_date = DateField("Payment Date", validators=[Optional()])
    notes = TextAreaField("Notes", validators=[Optional(), Length(max=2000)])
    submit = SubmitField("Save Commission")

    def entity_data(self):
        data = super().entity_data()
        amount = compute_commission_amount(data["deal_value"], data["commission_rate"])
        if amount is not None:
            data["commission_amount"] = amount
        return data

# RealtyMVP/forms/crm_forms.py
from datetime import datetime

from wtforms import StringField, TextAreaField, SelectField, SubmitField, DateTimeLocalField
from wtforms.validators import DataRequired, Optional, Length

from RealtyMVP.forms.base import EntityForm
from RealtyMVP.models.choices import (
    INTERACTION_TYPES, INTERACTION_OUTCOMES, REMINDER_TYPES, REMINDER_PRIORITIES, as_choices,
)

DATETIME_LOCAL_FORMAT = ["%Y-%m-%dT%H:%M", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M"]


def _now_minute():
    return datetime.now().replace(second=0, microsecond=0)


# 📞 Log an interaction
class InteractionForm(EntityForm):
    entity_fields = ("client_id", "property_id", "type", "title", "description", "date", "outcome")

    client_id = SelectField("Client", choices=[], default="")
    property_id = SelectField("Related Property", choices=[], default="")
    type = SelectField("Type", choices=INTERACTION_TYPES, default="note")
    title = StringField("Title", validators=[DataRequired(), Length(max=200)])
    description = TextAreaField("Details", validators=[Optional(), Length(max=5000)])
    date = DateTimeLocalField("Date & Time", format=DATETIME_LOCAL_FORMAT, default=_now_minute, validators=[Optional()])
    outcome = SelectField("Outcome", choices=INTERACTION_OUTCOMES, default="pending")
    submit = SubmitField("Save Interaction")


# ⏰ Reminder create / edit
class ReminderForm(EntityForm):
    entity_fields = (
        "title", "description", "due_date", "reminder_type", "priority", "client_id", "property_id",
    )

    title = StringField("Title", validators=[DataRequired(), Length(max=200)])
    description = TextAreaField("Description", validators=[Optional(), Length(max=2000)])
    due_date = DateTimeLocalField("Due", format=DATETIME_LOCAL_FORMAT, validators=[DataRequired()])
    reminder_type = SelectField("Type", choices=REMINDER_TYPES, default="custom")
    priority = SelectField("Priority", choices=as_choices(REMINDER_PRIORITIES), default="medium")
    client_id = SelectField("Client", choices=[], default="")
    property_id = SelectField("Property", choices=[], default="")
    submit = SubmitField("Save Reminder")

# RealtyMVP/forms/client_forms.py
from wtforms import StringField, TextAreaField, DecimalField, SelectField, SubmitField
from wtforms.validators import DataRequired, Optional, Length, Email, NumberRange, ValidationError

from RealtyMVP.forms.base import EntityForm, MultiCheckboxField, form_object
from RealtyMVP.models.choices import (
    CLIENT_TYPES, CLIENT_STATUSES, CLIENT_SOURCES, PREFERRED_PROPERTY_TYPES, as_choices,
)


# 👥 Client create / edit
class ClientForm(EntityForm):
    entity_fields = (
        "name", "email", "phone", "client_type", "status", "source",
        "budget_min", "budget_max", "preferred_property_types", "notes",
    )

    name = StringField("Full Name", validators=[DataRequired(), Length(max=120)])
    email = StringField("Email", validators=[Optional(), Email(), Length(max=120)])
    phone = StringField("Phone", validators=[Optional(), Length(max=50)])

    client_type = SelectField("Client Type", choices=as_choices(CLIENT_TYPES), default="buyer")
    status = SelectField("Status", choices=as_choices(CLIENT_STATUSES), default="active")
    source = SelectField("Source", choices=[("", "— Unknown —")] + as_choices(CLIENT_SOURCES), default="")

    budget_min = DecimalField("Budget Min ($)", validators=[Optional(), NumberRange(min=0)])
    budget_max = DecimalField("Budget Max ($)", validators=[Optional(), NumberRange(min=0)])
    preferred_locations = StringField("Preferred Locations", description="Comma separated")
    preferred_property_types = MultiCheckboxField(
        "Preferred Property Types", choices=[(t, t) for t in PREFERRED_PROPERTY_TYPES]
    )
    notes = TextAreaField("Notes", validators=[Optional(), Length(max=5000)])
    submit = SubmitField("Save Client")

    def validate_budget_max(self, field):
        if field.data is not None and self.budget_min.data is not None and field.data < self.budget_min.data:
            raise ValidationError("Maximum budget must not be below the minimum.")

    def location_list(self):
        raw = self.preferred_locations.data or ""
        return [loc.strip() for loc in raw.split(",") if loc.strip()]

    def entity_data(self):
        data = super().entity_data()
        data["preferred_locations"] = self.location_list()
        return data


def client_form_object(client):
    return form_object(
        client,
        preferred_locations=", ".join(client.preferred_locations or []),
        preferred_property_types=list(client.preferred_property_types or []),
    )

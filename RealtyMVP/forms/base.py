# RealtyMVP/forms/base.py
from types import SimpleNamespace

from flask_wtf import FlaskForm
from sqlalchemy import String
from wtforms import SelectMultipleField
from wtforms.widgets import CheckboxInput, ListWidget


class MultiCheckboxField(SelectMultipleField):
    widget = ListWidget(prefix_label=False)
    option_widget = CheckboxInput()


class EntityForm(FlaskForm):
    """A form whose fields map one-to-one onto an entity's columns."""

    entity_fields = ()

    def entity_data(self):
        return {name: self[name].data for name in self.entity_fields}

    def set_reference_choices(self, clients=None, properties=None, blank="— None —"):
        if clients is not None and "client_id" in self:
            self.client_id.choices = [("", blank)] + [(str(c.id), c.name) for c in clients]
        if clients is not None and "owner_client_id" in self:
            self.owner_client_id.choices = [("", blank)] + [(str(c.id), c.name) for c in clients]
        if properties is not None and "property_id" in self:
            self.property_id.choices = [("", blank)] + [(str(p.id), p.title) for p in properties]
        return self


def form_object(record, **overrides):
    """Snapshot a model as a plain object for ``Form(obj=...)``.

    Reference ids become strings and unset text columns become "" so they
    match select choices.
    """
    values = {}
    for c in record.__table__.columns:
        value = getattr(record, c.name)
        if value is None and isinstance(c.type, String):
            value = ""
        values[c.name] = value
    for name in ("client_id", "property_id", "owner_client_id"):
        if name in values:
            values[name] = "" if values[name] is None else str(values[name])
    values.update(overrides)
    return SimpleNamespace(**values)

# RealtyMVP/forms/property_forms.py
from types import SimpleNamespace

from wtforms import (
    Form, StringField, TextAreaField, DecimalField, IntegerField,
    SelectField, SubmitField, DateField, FieldList, FormField, MultipleFileField,
)
from wtforms.validators import DataRequired, Optional, Length, NumberRange, URL

from RealtyMVP.forms.base import EntityForm, MultiCheckboxField, form_object
from RealtyMVP.models.choices import (
    PROPERTY_TYPES, LISTING_TYPES, PROPERTY_STATUSES, FEATURE_OPTIONS, as_choices,
)


# 📡 One syndication row (plain Form: no CSRF token per row)
class PortalListingForm(Form):
    portal_name = StringField("Portal", validators=[Optional(), Length(max=100)])
    listing_url = StringField("Listing URL", validators=[Optional(), URL(require_tld=False)])
    listed_date = StringField("Listed", validators=[Optional()], render_kw={"type": "date"})

    def is_blank(self):
        return not any((self.portal_name.data, self.listing_url.data, self.listed_date.data))


# 🏠 Property create / edit
class PropertyForm(EntityForm):
    entity_fields = (
        "title", "description", "address", "city", "zip_code",
        "property_type", "listing_type", "status", "price",
        "bedrooms", "bathrooms", "area_sqft", "latitude", "longitude",
        "owner_client_id", "commission_rate", "contract_end_date", "features",
    )

    title = StringField("Title", validators=[DataRequired(), Length(max=200)])
    description = TextAreaField("Description", validators=[Optional(), Length(max=5000)])
    address = StringField("Address", validators=[DataRequired(), Length(max=255)])
    city = StringField("City", validators=[Optional(), Length(max=100)])
    zip_code = StringField("ZIP Code", validators=[Optional(), Length(max=20)])

    property_type = SelectField("Property Type", choices=as_choices(PROPERTY_TYPES), default="house")
    listing_type = SelectField("Listing Type", choices=as_choices(LISTING_TYPES), default="sale")
    status = SelectField("Status", choices=as_choices(PROPERTY_STATUSES), default="available")

    price = DecimalField("Price ($)", validators=[DataRequired(), NumberRange(min=0)])
    bedrooms = IntegerField("Bedrooms", validators=[Optional(), NumberRange(min=0)])
    bathrooms = DecimalField("Bathrooms", validators=[Optional(), NumberRange(min=0)])
    area_sqft = DecimalField("Area (sq ft)", validators=[Optional(), NumberRange(min=0)])

    latitude = DecimalField("Latitude", places=None, validators=[Optional(), NumberRange(min=-90, max=90)])
    longitude = DecimalField("Longitude", places=None, validators=[Optional(), NumberRange(min=-180, max=180)])

    owner_client_id = SelectField("Owner", choices=[], default="")
    commission_rate = DecimalField("Commission Rate (%)", default=3, validators=[Optional(), NumberRange(min=0, max=100)])
    contract_end_date = DateField("Contract End Date", validators=[Optional()])

    features = MultiCheckboxField("Features", choices=[(f, f) for f in FEATURE_OPTIONS])
    new_images = MultipleFileField("Upload Images")
    remove_images = MultiCheckboxField("Remove Images", choices=[])
    portal_listings = FieldList(FormField(PortalListingForm), min_entries=1)

    submit = SubmitField("Save Property")

    def set_image_choices(self, images):
        self.remove_images.choices = [(url, url) for url in (images or [])]
        return self

    def portal_listing_data(self):
        return [
            {
                "portal_name": row.portal_name.data or "",
                "listing_url": row.listing_url.data or "",
                "listed_date": row.listed_date.data or "",
            }
            for row in (entry.form for entry in self.portal_listings)
            if not row.is_blank()
        ]


def property_form_object(prop):
    return form_object(
        prop,
        features=list(prop.features or []),
        portal_listings=[SimpleNamespace(**row) for row in (prop.portal_listings or [])],
    )

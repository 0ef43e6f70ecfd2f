# RealtyMVP/forms/__init__.py
from .auth_forms import LoginForm
from .base import EntityForm, MultiCheckboxField, form_object
from .property_forms import PropertyForm, PortalListingForm, property_form_object
from .client_forms import ClientForm, client_form_object
from .commission_forms import CommissionForm
from .crm_forms import InteractionForm, ReminderForm

"""Form input, guest flag and user-facing status message for the auth and
profile screens."""
import logging
from typing import Dict, Iterable, Optional

from ..models import FORM_FIELDS, Profile
from ..state import Observable
from .profile_service import ProfileService

MSG_FILL_ALL_FIELDS = "Please fill in all fields"
MSG_PASSWORDS_DIFFER = "Passwords do not match"
MSG_ENTER_EMAIL = "Please enter your email"
MSG_BAD_CREDENTIALS = "Incorrect user or password"
MSG_EMAIL_TAKEN = "Email already registered"

LOGIN_FIELDS = ('email', 'password')
REGISTER_FIELDS = ('username', 'nameSurname', 'email', 'password', 'confirmPassword')

# form key -> Profile attribute
_PROFILE_KEYS = {
    'nameSurname': 'name_surname',
    'username': 'username',
    'description': 'description',
    'country': 'country',
    'email': 'email',
}


def empty_fields() -> Dict[str, str]:
    return {key: '' for key in FORM_FIELDS}


def merge_profile_info(fields: Dict[str, str], baseline: Profile) -> Profile:
    """Prefer non-blank form values over the *baseline* profile."""
    merged = {}
    for key, attr in _PROFILE_KEYS.items():
        value = fields.get(key) or ''
        merged[attr] = value if value.strip() else getattr(baseline, attr)
    return Profile(image_uri=baseline.image_uri, **merged)


class FormStateService:
    """Holds whatever form is currently on screen.

    * ``fields``: observable map of the seven form keys.
    * ``is_guest``: guest-mode flag, independent of authentication.
    * ``message``: a single pending user-facing message; a second
      :meth:`set_message` before the UI shows the first overwrites it.
      Every set notifies, so a repeated failure is shown again.
    * ``profile_info``: derived from ``fields`` and ``baseline`` and
      recomputed whenever either changes.
    """

    def __init__(self) -> None:
        self._log = logging.getLogger('gamevision.form')
        self.fields: Observable[Dict[str, str]] = Observable(empty_fields())
        self.is_guest: Observable[bool] = Observable(False)
        self.message: Observable[str] = Observable('', distinct=False)
        self.is_loading: Observable[bool] = Observable(False)
        self.baseline: Observable[Profile] = Observable(Profile(email=''))
        self.profile_info: Observable[Profile] = Observable(Profile(email=''))

        self.fields.subscribe(lambda _: self._recompute_profile_info())
        self.baseline.subscribe(lambda _: self._recompute_profile_info())

    def _recompute_profile_info(self) -> None:
        self.profile_info.set(merge_profile_info(self.fields.value, self.baseline.value))

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    def get_field(self, key: str) -> str:
        return self.fields.value.get(key, '')

    def set_field(self, key: str, value: str) -> None:
        self.fields.update(lambda current: {**current, key: value or ''})

    def clear_fields(self) -> None:
        self.fields.set(empty_fields())

    def _all_filled(self, keys: Iterable[str]) -> bool:
        fields = self.fields.value
        return all(fields.get(key) for key in keys)

    # ------------------------------------------------------------------
    # Guest flag and message slot
    # ------------------------------------------------------------------

    def set_guest(self, is_guest: bool) -> None:
        self.is_guest.set(bool(is_guest))

    def set_message(self, message: str) -> None:
        self.message.set(message)

    def clear_message(self) -> None:
        self.message.set('')

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_login(self) -> bool:
        if self._all_filled(LOGIN_FIELDS):
            return True
        self.set_message(MSG_FILL_ALL_FIELDS)
        return False

    def validate_registration(self) -> bool:
        if not self._all_filled(REGISTER_FIELDS):
            self.set_message(MSG_FILL_ALL_FIELDS)
            return False
        if self.get_field('password') != self.get_field('confirmPassword'):
            self.set_message(MSG_PASSWORDS_DIFFER)
            return False
        return True

    def validate_forgot_password(self) -> bool:
        if self.get_field('email'):
            return True
        self.set_message(MSG_ENTER_EMAIL)
        return False

    # ------------------------------------------------------------------
    # Store-backed actions
    # ------------------------------------------------------------------

    def login(self, profiles: ProfileService) -> bool:
        """Validate and check the credentials currently in the form."""
        if not self.validate_login():
            return False
        if profiles.check_credentials(self.get_field('email'), self.get_field('password')):
            self.set_guest(False)
            return True
        self.set_message(MSG_BAD_CREDENTIALS)
        return False

    def register(self, profiles: ProfileService) -> bool:
        """Validate the registration form and create the profile."""
        if not self.validate_registration():
            return False
        if profiles.register_profile(self.get_field('email'), self.fields.value):
            return True
        self.set_message(MSG_EMAIL_TAKEN)
        return False

    def load_profile(self, email: str, profiles: ProfileService) -> Optional[Profile]:
        """Fill the form and the baseline profile from the store."""
        self.is_loading.set(True)
        try:
            profile = profiles.fetch_profile(email)
            if profile is None:
                self._log.error("Could not load profile data for %s", email)
                return None
            self.baseline.set(profile)
            self.set_field('nameSurname', profile.name_surname)
            self.set_field('username', profile.username)
            self.set_field('description', profile.description)
            self.set_field('country', profile.country)
            self.set_field('email', email)
            return profile
        finally:
            self.is_loading.set(False)

    def save_profile(self, profiles: ProfileService) -> None:
        """Write the editable profile fields back; blank fields are left untouched."""
        email = self.get_field('email')
        updates = {key: (self.get_field(key) or None)
                   for key in ('nameSurname', 'username', 'description', 'country')}
        profiles.update_profile(email, updates)

    def logout(self) -> None:
        self.clear_fields()
        self.clear_message()
        self.set_guest(False)
        self.baseline.set(Profile(email=''))

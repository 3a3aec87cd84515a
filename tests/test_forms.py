from lawbook.forms import LoginForm, SignupForm, bind_form


def _signup(**fields):
    data = {"name": "Ann", "email": "a@x.com", "password": "longenough1", "role": "student"}
    data.update(fields)
    return bind_form(SignupForm, data)


def test_valid_signup_is_parsed_and_trimmed() -> None:
    form, state = _signup(name="  Ann  ", email=" a@x.com ")

    assert state.valid
    assert form.name == "Ann"
    assert form.email == "a@x.com"


def test_only_first_error_per_field_is_kept() -> None:
    form, state = _signup(email="")

    assert form is None
    assert state.field_errors == {"email": "This field cannot be blank"}


def test_password_length_limits() -> None:
    _, short = _signup(password="1234567")
    _, too_long = _signup(password="é" * 40)

    assert short.field_errors["password"] == "This field must be at least 8 characters long"
    assert too_long.field_errors["password"] == "This field must be at most 72 bytes long"


def test_role_must_be_known() -> None:
    _, state = _signup(role="judge")

    assert state.field_errors == {"role": "Please select a valid role"}


def test_failed_form_keeps_submitted_values() -> None:
    _, state = _signup(email="nope")

    assert state.values["email"] == "nope"
    assert state.field_errors["email"] == "This field must be a valid email address"


def test_non_field_errors_invalidate_form() -> None:
    form, state = bind_form(LoginForm, {"email": "a@x.com", "password": "whatever"})
    assert form is not None and state.valid

    state.add_non_field_error("Email or password is incorrect")

    assert not state.valid

from secure_forms.gatekeeper import FORM_ERRORS_MESSAGE, GateState
from secure_forms.notifications import NotificationKind
from secure_forms.security import SecurityManager
from secure_forms.tokens import TOKEN_FIELD_NAME
from secure_forms.validators import INVALID_EMAIL_MESSAGE, REQUIRED_MESSAGE


def form_and_fields(page, form_id):
    form = page.document.form_by_id(form_id)
    return form, {field.get('name'): field for field in page.document.fields(form)}


def token_fields(page, form):
    return form.find_all('input', attrs={'name': TOKEN_FIELD_NAME})


def test_every_form_gets_exactly_one_token(page):
    for form in page.document.forms():
        assert len(token_fields(page, form)) == 1

    signup = page.document.form_by_id('signup')
    hidden = token_fields(page, signup)[0]
    assert hidden['type'] == 'hidden'
    assert hidden['value'] == page.token.value == 'csrf_i00000000_rs'


def test_existing_token_field_is_left_alone(page):
    feedback = page.document.form_by_id('feedback')
    assert [field['value'] for field in token_fields(page, feedback)] == ['already-here']


def test_forms_share_the_page_token(page):
    values = {token_fields(page, page.document.form_by_id(form_id))[0]['value']
              for form_id in ('signup', 'profile')}
    assert values == {page.token.value}


def test_processing_twice_is_idempotent(page):
    page.init()

    signup = page.document.form_by_id('signup')
    assert len(token_fields(page, signup)) == 1
    assert len(page.events.handlers(signup, 'submit')) == 1


def test_submit_with_invalid_fields_is_blocked(page):
    form, fields = form_and_fields(page, 'signup')
    page.document.set_value(fields['email'], 'bad')

    assert page.submit(form) is False

    assert page.errors.message_for(fields['name']) == REQUIRED_MESSAGE
    assert page.errors.message_for(fields['email']) == INVALID_EMAIL_MESSAGE
    notification = page.notifications.current()
    assert notification.text == FORM_ERRORS_MESSAGE
    assert notification.kind is NotificationKind.ERROR
    assert page.gatekeeper.last_outcome(form) is GateState.REJECTED
    assert page.gatekeeper.state(form) is GateState.IDLE


def test_submit_with_valid_fields_proceeds(page):
    form, fields = form_and_fields(page, 'signup')
    page.type_into(fields['name'], 'Ada')
    page.type_into(fields['email'], 'ada@example.com')

    assert page.submit(form) is True
    assert page.gatekeeper.last_outcome(form) is GateState.ACCEPTED
    assert page.gatekeeper.state(form) is GateState.IDLE
    assert page.notifications.current() is None
    assert page.document.select('.field-error') == []


def test_blur_validates_and_input_clears(page):
    _, fields = form_and_fields(page, 'signup')

    page.blur(fields['name'])
    assert page.errors.message_for(fields['name']) == REQUIRED_MESSAGE

    page.type_into(fields['name'], 'A')
    assert not page.errors.has_error(fields['name'])
    assert page.errors.message_for(fields['name']) is None


def test_input_clears_error_even_when_still_invalid(page):
    _, fields = form_and_fields(page, 'signup')
    page.type_into(fields['email'], 'bad')
    page.blur(fields['email'])
    assert page.errors.has_error(fields['email'])

    page.type_into(fields['email'], 'still-bad')
    assert not page.errors.has_error(fields['email'])


def test_submit_revalidates_values_changed_without_blur(page):
    form, fields = form_and_fields(page, 'signup')
    page.type_into(fields['name'], 'Ada')
    page.blur(fields['name'])
    assert not page.errors.has_error(fields['name'])

    page.document.set_value(fields['name'], '   ')

    assert page.submit(form) is False
    assert page.errors.message_for(fields['name']) == REQUIRED_MESSAGE


def test_textarea_is_validated(page):
    form, fields = form_and_fields(page, 'feedback')
    assert page.submit(form) is False
    assert page.errors.message_for(fields['notes']) == REQUIRED_MESSAGE

    page.type_into(fields['notes'], 'Looks fine')
    assert page.submit(form) is True


def test_resubmitting_after_a_fix_is_accepted(page):
    form, fields = form_and_fields(page, 'signup')
    assert page.submit(form) is False
    page.type_into(fields['name'], 'Ada')
    assert page.submit(form) is True
    assert page.gatekeeper.last_outcome(form) is GateState.ACCEPTED


def test_same_name_required_fields_are_annotated_separately():
    page = SecurityManager.load(
        '<form id="tags"><div><input name="tag" required><input name="tag" required></div></form>'
    )
    form = page.document.form_by_id('tags')
    first, second = page.document.fields(form)[:2]

    assert page.submit(form) is False
    assert len(page.document.select('.field-error')) == 2

    page.type_into(second, 'x')
    assert page.errors.message_for(first) == REQUIRED_MESSAGE
    assert page.errors.has_error(first)
    assert not page.errors.has_error(second)
    assert len(page.document.select('.field-error')) == 1

from secure_forms.notifications import NotificationKind
from secure_forms.uploads import (
    ACCEPTED_MESSAGE,
    ALLOWED_EXTENSIONS,
    INVALID_TYPE_MESSAGE,
    MAX_UPLOAD_BYTES,
    TOO_LARGE_MESSAGE,
    FileDescriptor,
    validate_file,
)

MIB = 1024 * 1024


def test_no_selection_is_accepted():
    assert validate_file(None)


def test_small_png_is_accepted():
    assert validate_file(FileDescriptor('image/png', 4 * MIB))


def test_ceiling_is_inclusive():
    assert validate_file(FileDescriptor('application/pdf', MAX_UPLOAD_BYTES))
    assert not validate_file(FileDescriptor('application/pdf', MAX_UPLOAD_BYTES + 1))


def test_large_png_reports_size():
    result = validate_file(FileDescriptor('image/png', 6 * MIB))
    assert result.message == TOO_LARGE_MESSAGE


def test_gif_reports_type():
    result = validate_file(FileDescriptor('image/gif', 1024))
    assert result.message == INVALID_TYPE_MESSAGE


def test_type_check_precedes_size_check():
    result = validate_file(FileDescriptor('image/gif', 6 * MIB))
    assert result.message == INVALID_TYPE_MESSAGE


def test_messages_name_allowed_types_and_ceiling():
    assert 'JPG, PNG, PDF, DOC' in INVALID_TYPE_MESSAGE
    assert '5MB' in INVALID_TYPE_MESSAGE
    assert '5MB' in TOO_LARGE_MESSAGE


def test_file_inputs_get_accept_list(page):
    avatar = page.document.named(page.document.form_by_id('profile'), 'avatar')
    assert avatar['accept'] == ALLOWED_EXTENSIONS


def test_rejected_file_clears_selection(page):
    avatar = page.document.named(page.document.form_by_id('profile'), 'avatar')

    kept = page.choose_file(avatar, FileDescriptor('image/gif', 10), 'cat.gif')

    assert kept is False
    assert page.document.selected_file(avatar) is None
    assert page.document.value(avatar) == ''
    assert page.errors.message_for(avatar) == INVALID_TYPE_MESSAGE
    assert page.notifications.current() is None


def test_accepted_file_notifies_and_clears_error(page):
    avatar = page.document.named(page.document.form_by_id('profile'), 'avatar')
    page.choose_file(avatar, FileDescriptor('image/gif', 10), 'cat.gif')

    kept = page.choose_file(avatar, FileDescriptor('image/jpeg', 2048), 'cat.jpg')

    assert kept is True
    assert page.document.value(avatar) == 'cat.jpg'
    assert not page.errors.has_error(avatar)
    notification = page.notifications.current()
    assert notification.text == ACCEPTED_MESSAGE
    assert notification.kind is NotificationKind.SUCCESS

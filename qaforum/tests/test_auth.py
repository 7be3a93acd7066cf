import pytest
from pydantic import ValidationError

from qaforum.auth import can_delete, hash_password, verify_password
from qaforum.error_handlers import validation_message
from qaforum.schemas.users import RegisterIn


@pytest.mark.parametrize('operator_id, role, author_id, allowed', [
    (1, 'user', 1, True),
    (1, 'user', 2, False),
    (1, 'admin', 2, True),
    (1, None, 1, True),
    (1, None, 2, False),
    (1, 'user', None, False),
    (1, 'admin', None, True),
])
def test_delete_rule(operator_id, role, author_id, allowed):
    assert can_delete(operator_id, role, author_id) is allowed


@pytest.mark.asyncio
async def test_hash_uses_fresh_salt():
    a = await hash_password('secret1')
    b = await hash_password('secret1')
    assert a != b
    assert await verify_password('secret1', a)
    assert not await verify_password('secret2', b)


def test_validation_message_prefers_validator_text():
    with pytest.raises(ValidationError) as exc:
        RegisterIn(username='amy', password='123', role='user')
    assert validation_message(exc.value.errors()) == 'password must be at least 6 characters'


def test_validation_message_names_missing_field():
    with pytest.raises(ValidationError) as exc:
        RegisterIn(username='amy', password='secret1')
    assert validation_message(exc.value.errors()) == 'role: Field required'
    assert validation_message([]) == 'invalid request'

import pytest

from localshortener.utils.runtime import running_locally


@pytest.mark.parametrize(
    'app_env, sam_local, expected',
    [
        ('local', None, True),
        ('LOCAL', None, True),
        ('dev', 'true', True),
        ('dev', None, False),
        ('prod', 'false', False),
        (None, None, False),
    ],
)
def test_running_locally(monkeypatch, app_env, sam_local, expected):
    for name, value in (('APP_ENV', app_env), ('AWS_SAM_LOCAL', sam_local)):
        if value is None:
            monkeypatch.delenv(name, raising=False)
        else:
            monkeypatch.setenv(name, value)

    assert running_locally() is expected

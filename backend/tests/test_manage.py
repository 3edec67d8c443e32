import pytest
from jose import jwt
from typer.testing import CliRunner

import manage
from app.config import settings

runner = CliRunner()


@pytest.fixture(autouse=True)
def override_db():
    # CLI 는 자체 이벤트 루프와 DB 를 사용하므로 공용 세션 오버라이드가 필요 없습니다.
    yield


def test_init_db_and_create_admin(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}"

    result = runner.invoke(manage.cli, ["init-db", "--database-url", url])
    assert result.exit_code == 0, result.output

    result = runner.invoke(manage.cli, ["create-admin", "--email", "root@example.com", "--database-url", url])
    assert result.exit_code == 0, result.output
    assert "role=admin" in result.output

    # 두 번 실행해도 같은 사용자를 승격할 뿐입니다.
    result = runner.invoke(manage.cli, ["create-admin", "-e", "root@example.com", "-n", "Root", "--database-url", url])
    assert result.exit_code == 0, result.output
    assert "id=1 " in result.output


def test_issue_token_prints_verifiable_token():
    result = runner.invoke(manage.cli, ["issue-token", "--email", "dev@example.com"])
    assert result.exit_code == 0, result.output
    payload = jwt.decode(result.output.strip(), settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    assert payload["sub"] == "dev@example.com"
    assert payload["type"] == "access"

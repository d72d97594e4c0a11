from pathlib import Path

import pytest

from src.platform.config.core_setting import Settings


@pytest.mark.unit
class TestCorsOrigins:
    def test_comma_list_from_env_file(self, tmp_path: Path) -> None:
        env_file = tmp_path / '.env'
        env_file.write_text('BACKEND_CORS_ORIGINS=http://localhost:3000, https://shop.example.com\n')

        settings = Settings(_env_file=env_file)

        assert settings.BACKEND_CORS_ORIGINS == [
            'http://localhost:3000',
            'https://shop.example.com',
        ]

    def test_comma_list_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv('BACKEND_CORS_ORIGINS', 'http://a.example.com,http://b.example.com')

        settings = Settings(_env_file=None)

        assert settings.BACKEND_CORS_ORIGINS == ['http://a.example.com', 'http://b.example.com']

    def test_json_list_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv('BACKEND_CORS_ORIGINS', '["http://a.example.com"]')

        settings = Settings(_env_file=None)

        assert settings.BACKEND_CORS_ORIGINS == ['http://a.example.com']

    def test_shipped_env_example_loads(self) -> None:
        env_example = Path(__file__).resolve().parents[3] / '.env.example'

        settings = Settings(_env_file=env_example)

        assert settings.BACKEND_CORS_ORIGINS == ['http://localhost:3000']

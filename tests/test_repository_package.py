from shipyard import repository


def test_repository_is_package_with_public_api() -> None:
    assert repository.__file__ is not None
    assert repository.__file__.endswith("shipyard/repository/__init__.py")

    expected_exports = [
        "load_project",
        "pipeline_exists",
        "application_exists",
        "environment_exists",
        "load_group",
        "create_application",
        "attach_pipeline",
        "create_trigger",
        "create_hook",
        "create_poller",
        "upsert_notification_setting",
        "transaction_scope",
    ]
    for export_name in expected_exports:
        assert hasattr(repository, export_name), f"Missing export: {export_name}"


def test_repository___all___contains_public_symbols() -> None:
    assert "create_hook" in repository.__all__
    assert "list_triggers" in repository.__all__
    assert all(not name.startswith("_") for name in repository.__all__)
    assert all(hasattr(repository, name) for name in repository.__all__)

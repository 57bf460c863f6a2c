from wellness_forum.scripts import migrate


def test_upgrade_runs_alembic_head(mocker) -> None:
    upgrade = mocker.patch("wellness_forum.scripts.migrate.command.upgrade")

    migrate.main([])

    cfg, revision = upgrade.call_args.args
    assert revision == "head"
    assert cfg.get_main_option("script_location").endswith("migrations")


def test_reset_recreates_tables(mocker) -> None:
    drop = mocker.patch("wellness_forum.scripts.migrate.drop_tables")
    create = mocker.patch("wellness_forum.scripts.migrate.create_tables")
    upgrade = mocker.patch("wellness_forum.scripts.migrate.command.upgrade")

    migrate.main(["--reset"])

    drop.assert_called_once_with()
    create.assert_called_once_with()
    upgrade.assert_not_called()

"""Tests for main application module."""

import pytest

from disk_manage import main
from disk_manage.ui.launcher import NullLauncher, ToolLauncher


@pytest.fixture
def app(mocker):
    """Skip logging/settings side effects and pretend to be root."""
    env = mocker.Mock()
    env.setup_logging = mocker.patch("disk_manage.main.setup_logging")
    env.load_settings = mocker.patch("disk_manage.main.load_settings")
    env.geteuid = mocker.patch("disk_manage.main.os.geteuid", return_value=0)
    return env


# ==============================================================================
# Argument Parsing
# ==============================================================================


class TestBuildParser:
    def test_defaults(self):
        args = main.build_parser().parse_args([])
        assert (args.debug, args.trace, args.log_dir, args.no_gui) == (False, False, None, False)

    def test_flags(self, tmp_path):
        args = main.build_parser().parse_args(["-d", "--no-gui", "--log-dir", str(tmp_path)])
        assert args.debug and args.no_gui
        assert args.log_dir == tmp_path


# ==============================================================================
# Session
# ==============================================================================


class TestMain:
    def test_quit_exits_zero(self, app, scripted_prompter):
        prompter = scripted_prompter("q")

        assert main.main([], prompter=prompter) == 0

        output = prompter.output.getvalue()
        assert output.startswith(main.BANNER)
        assert "Exiting." in output
        app.setup_logging.assert_called_once_with(debug=False, trace=False, log_dir=None)
        app.load_settings.assert_called_once_with()

    def test_requires_root(self, app, scripted_prompter, capsys):
        app.geteuid.return_value = 1000
        prompter = scripted_prompter("q")

        assert main.main([], prompter=prompter) == 1

        assert "ERROR: Run as root" in capsys.readouterr().err
        assert prompter._input.questions == []

    def test_fatal_error_exits_one(self, app, scripted_prompter, capsys, block_devices, mocker):
        mocker.patch("disk_manage.storage.devices.list_disks", return_value="")
        prompter = scripted_prompter("1", "sdz")

        assert main.main([], prompter=prompter) == 1

        assert "ERROR: Block device '/dev/sdz' not found" in capsys.readouterr().err

    def test_declined_confirmation_exits_one(
        self, app, scripted_prompter, capsys, block_devices, mocker
    ):
        mocker.patch("disk_manage.storage.devices.list_disks", return_value="")
        block_devices.add("/dev/sdb")
        prompter = scripted_prompter("3", "sdb", "n")

        assert main.main([], prompter=prompter) == 1

        assert "ERROR: Aborted by user." in capsys.readouterr().err

    def test_eof_exits_130(self, app, scripted_prompter):
        assert main.main([], prompter=scripted_prompter()) == 130

    def test_no_gui_uses_null_launcher(self, app, scripted_prompter, mocker):
        actions_cls = mocker.patch("disk_manage.main.MenuActions")

        main.main(["--no-gui"], prompter=scripted_prompter("q"))

        assert isinstance(actions_cls.call_args.args[1], NullLauncher)

    def test_gui_launcher_by_default(self, app, scripted_prompter, mocker):
        actions_cls = mocker.patch("disk_manage.main.MenuActions")

        main.main([], prompter=scripted_prompter("q"))

        launcher = actions_cls.call_args.args[1]
        assert isinstance(launcher, ToolLauncher)
        assert not isinstance(launcher, NullLauncher)


def test_run_exits_with_main_status(mocker):
    mocker.patch("disk_manage.main.main", return_value=0)

    with pytest.raises(SystemExit) as info:
        main.run()
    assert info.value.code == 0


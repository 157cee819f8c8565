"""Tests for the command line entry point."""

from pathlib import Path

import pytest

from kzstereo.cli import main, parse_disparity
from kzstereo.errors import InvalidArgument


def _images(paths: tuple[Path, Path]) -> list[str]:
    return [str(paths[0]), str(paths[1])]


class TestParseDisparity:
    """Test dMin/dMax parsing."""

    @pytest.mark.parametrize("token,expected", [("0", 0), ("-15", -15), ("+7", 7), (" 3", 3)])
    def test_valid(self, token: str, expected: int) -> None:
        """Whole-token integers are accepted."""
        assert parse_disparity(token) == expected

    @pytest.mark.parametrize("token", ["5x", "1.5", "", "3 ", "ten"])
    def test_invalid(self, token: str) -> None:
        """Anything left after the integer is an error."""
        with pytest.raises(InvalidArgument, match="dMin or dMax"):
            parse_disparity(token)


class TestMainReport:
    """Test the report mode."""

    def test_lambda_five_halves(self, gray_pair_paths, capsys: pytest.CaptureFixture) -> None:
        """--lambda 5/2 prints K=25/2 and lambda=5/2."""
        status = main(["--lambda", "5/2", *_images(gray_pair_paths), "-4", "0"])

        assert status == 0
        assert capsys.readouterr().out == "K=25/2\nlambda=5/2\n"

    def test_forced_k(self, gray_pair_paths, capsys: pytest.CaptureFixture) -> None:
        """-k 30 prints K=30 and lambda=6."""
        status = main(["-k", "30", *_images(gray_pair_paths), "-4", "0"])

        assert status == 0
        assert capsys.readouterr().out == "K=30\nlambda=6\n"

    def test_options_after_positionals(self, gray_pair_paths, capsys: pytest.CaptureFixture) -> None:
        """Options may follow the positional arguments."""
        status = main([*_images(gray_pair_paths), "-4", "0", "-l", "5/2", "-c", "L1"])

        assert status == 0
        assert capsys.readouterr().out == "K=25/2\nlambda=5/2\n"

    def test_automatic_k_uses_solver(self, gray_pair_paths, recording_factory,
                                     capsys: pytest.CaptureFixture) -> None:
        """Without lambda and K the solver estimate is used."""
        status = main([*_images(gray_pair_paths), "-4", "0", "--seed", "3"],
                      solver_factory=recording_factory)

        assert status == 0
        assert capsys.readouterr().out == "K=30\nlambda=6\n"
        assert "get_k" in recording_factory.created[0].calls

    def test_options_reach_solver(self, gray_pair_paths, recording_factory) -> None:
        """Pass-through options end up in the pushed parameters."""
        status = main(["-i", "9", "-t", "12", "-r", "-c", "L1", "-k", "30",
                       *_images(gray_pair_paths), "-4", "0"],
                      solver_factory=recording_factory)

        pushed = recording_factory.created[0].pushed[-1]
        assert status == 0
        assert pushed.max_iterations == 9
        assert pushed.edge_threshold == 12
        assert pushed.randomize_order is True
        assert pushed.data_cost.value == "L1"


class TestMainSolve:
    """Test the solve mode."""

    def test_scaled_output(self, gray_pair_paths, temp_dir: Path, recording_factory,
                           capsys: pytest.CaptureFixture) -> None:
        """-o runs the solver and saves the scaled map only."""
        output = temp_dir / "scaled.png"

        status = main(["-o", str(output), "-k", "30", *_images(gray_pair_paths), "-4", "0"],
                      solver_factory=recording_factory)

        solver = recording_factory.created[0]
        assert status == 0
        assert solver.saved == [("scaled", output, False)]
        assert capsys.readouterr().out == ""

    def test_positional_output(self, gray_pair_paths, temp_dir: Path, recording_factory) -> None:
        """A fifth positional argument saves the raw map."""
        output = temp_dir / "disp.tif"

        status = main(["-k", "30", *_images(gray_pair_paths), "-4", "0", str(output)],
                      solver_factory=recording_factory)

        assert status == 0
        assert recording_factory.created[0].saved == [("raw", output, None)]

    def test_without_backend(self, gray_pair_paths, temp_dir: Path,
                             caplog: pytest.LogCaptureFixture) -> None:
        """The bundled Match cannot optimize and reports it."""
        status = main(["-k", "30", *_images(gray_pair_paths), "-4", "0", str(temp_dir / "d.tif")])

        assert status == 1
        assert "graph-cut backend" in caplog.text


class TestMainErrors:
    """Test exit status 1 paths."""

    def test_wrong_positional_count(self, gray_pair_paths, recording_factory,
                                    capsys: pytest.CaptureFixture,
                                    caplog: pytest.LogCaptureFixture) -> None:
        """Three positionals print usage before any token is decoded."""
        status = main(["-l", "abc", *_images(gray_pair_paths), "-4"],
                      solver_factory=recording_factory)

        assert status == 1
        assert "Usage: kzstereo" in capsys.readouterr().err
        assert "Unable to decode" not in caplog.text
        assert recording_factory.created == []

    def test_too_many_positionals(self, gray_pair_paths, capsys: pytest.CaptureFixture) -> None:
        """Six positionals are rejected too."""
        status = main([*_images(gray_pair_paths), "-4", "0", "a.tif", "b.tif"])

        assert status == 1
        assert "Usage: kzstereo" in capsys.readouterr().err

    def test_malformed_fraction(self, gray_pair_paths, recording_factory,
                                caplog: pytest.LogCaptureFixture) -> None:
        """-l abc aborts before the solver is created."""
        status = main(["-l", "abc", *_images(gray_pair_paths), "-4", "0"],
                      solver_factory=recording_factory)

        assert status == 1
        assert "Unable to decode abc as fraction" in caplog.text
        assert recording_factory.created == []

    def test_bad_data_cost(self, gray_pair_paths, caplog: pytest.LogCaptureFixture) -> None:
        """Only L1 and L2 are accepted."""
        status = main(["-c", "L3", *_images(gray_pair_paths), "-4", "0"])

        assert status == 1
        assert "must be 'L1' or 'L2'" in caplog.text

    def test_bad_disparity(self, gray_pair_paths, caplog: pytest.LogCaptureFixture) -> None:
        """dMin with trailing garbage fails."""
        status = main([*_images(gray_pair_paths), "-4x", "0"])

        assert status == 1

    def test_bad_disparity_bound(self, gray_pair_paths, caplog: pytest.LogCaptureFixture) -> None:
        """dMax with trailing garbage fails with a diagnostic."""
        status = main([*_images(gray_pair_paths), "0", "4px"])

        assert status == 1
        assert "Error reading dMin or dMax" in caplog.text

    def test_missing_image(self, temp_dir: Path, caplog: pytest.LogCaptureFixture) -> None:
        """An unreadable image fails with its path."""
        status = main([str(temp_dir / "a.png"), str(temp_dir / "b.png"), "0", "4"])

        assert status == 1
        assert "Unable to read image" in caplog.text

    def test_bad_integer_option(self, gray_pair_paths) -> None:
        """A non-integer iteration count is a usage error."""
        status = main(["-i", "many", *_images(gray_pair_paths), "-4", "0"])

        assert status == 1

    def test_unknown_option(self, gray_pair_paths) -> None:
        """Unknown options are rejected."""
        status = main(["--frobnicate", *_images(gray_pair_paths), "-4", "0"])

        assert status == 1

    def test_negative_seed(self, gray_pair_paths, recording_factory,
                           caplog: pytest.LogCaptureFixture) -> None:
        """A negative seed is rejected before the solver is created."""
        status = main(["--seed", "-1", *_images(gray_pair_paths), "-4", "0"],
                      solver_factory=recording_factory)

        assert status == 1
        assert "The seed must be >= 0" in caplog.text
        assert recording_factory.created == []

    def test_k_beyond_float_range(self, gray_pair_paths, recording_factory,
                                  caplog: pytest.LogCaptureFixture) -> None:
        """An occlusion cost too large for a float fails with a diagnostic."""
        status = main(["-k", "9" * 400, *_images(gray_pair_paths), "-4", "0"],
                      solver_factory=recording_factory)

        assert status == 1
        assert "floating point range" in caplog.text

    def test_fraction_checked_before_disparity(self, gray_pair_paths,
                                               caplog: pytest.LogCaptureFixture) -> None:
        """A bad cost token is reported ahead of a bad dMin."""
        status = main(["-l", "abc", *_images(gray_pair_paths), "4x", "0"])

        assert status == 1
        assert "Unable to decode abc as fraction" in caplog.text
        assert "Error reading dMin or dMax" not in caplog.text

"""Tests for the scripts/predict_file.py command line tool."""

import importlib.util
import io
import json
import sys
from pathlib import Path

import pytest

from model.errors import ModelLoadError
from model.infer import predict_image

from tests.fixtures import FakeEmotionModel, generate_gray_png_bytes, generate_rgb_png_bytes


SCRIPT_PATH = Path(__file__).parent.parent / "scripts" / "predict_file.py"


@pytest.fixture
def script():
    """Import the script as a module."""
    spec = importlib.util.spec_from_file_location("predict_file", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def model_file(tmp_path) -> Path:
    """Placeholder model file; loading is replaced by a scripted model."""
    path = tmp_path / "model.onnx"
    path.write_bytes(b"stub")
    return path


@pytest.fixture
def image_file(tmp_path) -> Path:
    """All-black 64x64 grayscale PNG on disk."""
    path = tmp_path / "face.png"
    path.write_bytes(generate_gray_png_bytes(value=0))
    return path


@pytest.fixture
def scripted(script, monkeypatch):
    """Route the script's predictions through a scripted model."""
    model = FakeEmotionModel([2.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0])

    def fake_predict(image, model_path):
        return predict_image(image, model=model)

    monkeypatch.setattr(script, "predict_image", fake_predict)
    return model


class TestPredictFileScript:
    """Tests for the predict_file main() entry point."""

    def test_missing_model(self, script, image_file, tmp_path, capsys):
        """A missing model file exits with 1."""
        missing = tmp_path / "missing.onnx"

        code = script.main(["--model", str(missing), "--input", str(image_file)])

        assert code == 1
        assert f"{missing} does not exist" in capsys.readouterr().err

    def test_missing_input(self, script, model_file, tmp_path, capsys):
        """A missing input image exits with 1."""
        missing = tmp_path / "missing.png"

        code = script.main(["--model", str(model_file), "--input", str(missing)])

        assert code == 1
        assert f"{missing} does not exist" in capsys.readouterr().err

    def test_prints_time_and_top_two(self, script, scripted, model_file, image_file, capsys):
        """Output is the computation time followed by two ranked labels."""
        code = script.main(["--model", str(model_file), "--input", str(image_file)])

        lines = capsys.readouterr().out.splitlines()
        assert code == 0
        assert lines[0].startswith("Computation time: ")
        assert lines[0].endswith("ms")
        assert lines[1:] == ["neutral / 51.35%", "happiness / 6.95%"]

    def test_top_k_option(self, script, scripted, model_file, image_file, capsys):
        """--top-k controls how many labels are printed."""
        script.main(["-m", str(model_file), "-i", str(image_file), "-k", "3"])

        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 4
        assert lines[3] == "surprise / 6.95%"

    @pytest.mark.parametrize("k", ["0", "-1", "9", "two"])
    def test_top_k_out_of_range_rejected(self, script, scripted, model_file, image_file, k, capsys):
        """--top-k must be between 1 and the number of labels."""
        with pytest.raises(SystemExit) as exc_info:
            script.main(["--model", str(model_file), "--input", str(image_file), "--top-k", k])

        assert exc_info.value.code != 0
        assert "--top-k" in capsys.readouterr().err
        assert scripted.run_count == 0

    def test_top_k_all_labels(self, script, scripted, model_file, image_file, capsys):
        """--top-k 8 prints every label."""
        script.main(["--model", str(model_file), "--input", str(image_file), "--top-k", "8"])

        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 9

    def test_json_output(self, script, scripted, model_file, image_file, capsys):
        """--json prints the full prediction."""
        code = script.main(["--model", str(model_file), "--input", str(image_file), "--json"])

        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["emotion"] == "neutral"
        assert len(data["ranking"]) == 8

    def test_reads_stdin(self, script, scripted, model_file, monkeypatch, capsys):
        """--input - reads the image from stdin."""
        stdin = io.TextIOWrapper(io.BytesIO(generate_gray_png_bytes(value=0)))
        monkeypatch.setattr(sys, "stdin", stdin)

        code = script.main(["--model", str(model_file), "--input", "-"])

        assert code == 0
        assert "neutral / 51.35%" in capsys.readouterr().out

    def test_color_image_exit_code(self, script, scripted, model_file, tmp_path, capsys):
        """Image errors exit with 2."""
        path = tmp_path / "color.png"
        path.write_bytes(generate_rgb_png_bytes())

        code = script.main(["--model", str(model_file), "--input", str(path)])

        assert code == 2
        assert "gray image" in capsys.readouterr().err

    def test_model_error_exit_code(self, script, model_file, image_file, monkeypatch, capsys):
        """Model errors exit with 3."""
        def failing_predict(image, model_path):
            raise ModelLoadError(message="Failed to load ONNX model", code="LOAD_FAILED")

        monkeypatch.setattr(script, "predict_image", failing_predict)

        code = script.main(["--model", str(model_file), "--input", str(image_file)])

        assert code == 3
        assert "LOAD_FAILED" in capsys.readouterr().err


class TestGenerateFixturesScript:
    """Tests for the scripts/generate_fixtures.py sample image generator."""

    @pytest.fixture
    def generator(self):
        """Import the generator script as a module."""
        path = Path(__file__).parent.parent / "scripts" / "generate_fixtures.py"
        spec = importlib.util.spec_from_file_location("generate_fixtures", path)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    def test_writes_gray_samples(self, generator, tmp_path):
        """Gray samples decode as 64x64 grayscale images."""
        from faceio import load_gray_image

        written = generator.main(["--output-dir", str(tmp_path)])

        assert (tmp_path / "avatar64.png") in written
        image = load_gray_image(tmp_path / "avatar64.png")
        assert (image.height, image.width) == (64, 64)
        assert load_gray_image(tmp_path / "black64.png").at(10, 10) == 0

    def test_gradient_spans_full_range(self, generator, tmp_path):
        """The gradient runs from 0 to 255 across each row."""
        from faceio import load_gray_image

        generator.main(["-o", str(tmp_path)])

        image = load_gray_image(tmp_path / "gradient64.png")
        assert image.at(0, 0) == 0
        assert image.at(63, 63) == 255

    def test_color_sample_is_refused(self, generator, tmp_path):
        """The color sample is rejected by the gray loader."""
        from faceio import load_gray_image
        from faceio.errors import ImageDecodeError

        generator.main(["-o", str(tmp_path)])

        with pytest.raises(ImageDecodeError):
            load_gray_image(tmp_path / "color64.png")

import pandas as pd
import pytest

from euro_mc_pricer.cli import build_parser, main


def test_defaults():
    args = build_parser().parse_args([])
    assert (args.spot, args.strike, args.rate, args.volatility, args.maturity) == (100.0, 105.0, 0.05, 0.20, 1.0)
    assert args.simulations == 1_000_000
    assert args.confidence == 0.95
    assert args.counts[0] == 1000 and args.counts[-1] == 5_000_000
    assert args.seed is None


def test_counts_parsing():
    args = build_parser().parse_args(["--counts", "100,1000, 10000"])
    assert args.counts == [100, 1000, 10000]


def test_bad_counts_exit():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--counts", "ten,20"])


def test_main_writes_reports(tmp_path, capsys):
    code = main([
        "--simulations", "20000", "--counts", "100,1000", "--seed", "7",
        "--out-dir", str(tmp_path),
    ])
    assert code == 0
    out = capsys.readouterr().out
    assert "Estimated European Call Price:" in out
    assert "Put Price 95% Confidence Interval:" in out
    assert "Black-Scholes Call Price:" in out
    for prefix in ("call_option", "put_option"):
        frame = pd.read_csv(tmp_path / f"{prefix}_convergence.csv")
        assert frame["Simulations"].tolist() == [100, 1000]


def test_main_is_reproducible_with_seed(capsys):
    argv = ["--simulations", "5000", "--seed", "3", "--no-convergence"]
    main(argv)
    first = capsys.readouterr().out
    main(argv)
    assert capsys.readouterr().out == first


def test_main_rejects_invalid_inputs(capsys):
    assert main(["--spot", "-1", "--no-convergence"]) == 2
    assert "[ERROR]" in capsys.readouterr().err
    assert main(["--simulations", "0", "--no-convergence"]) == 2
    assert main(["--strike", "0", "--no-convergence"]) == 2


def test_main_labels_fallback_confidence_as_95(capsys):
    assert main(["--simulations", "2000", "--seed", "1", "--confidence", "0.97", "--no-convergence"]) == 0
    out = capsys.readouterr().out
    assert "Call Price 95% Confidence Interval:" in out
    assert "97%" not in out


def test_main_survives_unusable_out_dir(tmp_path, capsys):
    blocker = tmp_path / "afile"
    blocker.write_text("not a directory")
    code = main([
        "--simulations", "2000", "--counts", "100,1000", "--seed", "7",
        "--out-dir", str(blocker / "sub"),
    ])
    assert code == 0
    out = capsys.readouterr().out
    assert "--- Convergence Analysis for Call Option ---" in out
    assert "--- Convergence Analysis for Put Option ---" in out
    assert out.count("Error: could not write") == 2

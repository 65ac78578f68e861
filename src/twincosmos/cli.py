# ──────────────────────────────────────────────────────────────────────
# TwinCosmos — Unified CLI
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import click
from pydantic import ValidationError

from twincosmos.analysis import plot_history, summarize_history
from twincosmos.control.decision_engine import Decision, DecisionEngine, DecisionEngineConfig
from twincosmos.control.digital_twin import DigitalTwin, TickResult
from twincosmos.core.config_schema import TwinConfig, load_config
from twincosmos.core.plasma_sim import PlasmaSimulator
from twincosmos.core.plasma_state import PlasmaSnapshot
from twincosmos.io.logging_config import setup_twin_logging


LOGGER = logging.getLogger("twincosmos.cli")
DEFAULT_STEPS = 20

# Reference operating points for the decision demo.
DEMO_STATES: dict[str, dict[str, float]] = {
    "cold-start": {"temperature": 1e6, "density": 1e18, "stability": 0.1, "fusion_power": 0.0},
    "heating-up": {"temperature": 5e7, "density": 5e19, "stability": 0.3, "fusion_power": 1e4},
    "near-ignition": {"temperature": 8e7, "density": 1e20, "stability": 0.6, "fusion_power": 1e6},
    "burn-phase": {"temperature": 1.5e8, "density": 1e20, "stability": 0.85, "fusion_power": 5e7},
    "stable-operation": {"temperature": 1e8, "density": 1e20, "stability": 0.95, "fusion_power": 1e8},
}


@dataclass(frozen=True)
class RunRequest:
    config: TwinConfig
    steps: int
    delta_time: float
    plot_path: Optional[Path]


@dataclass(frozen=True)
class ModeSpec:
    runner: Callable[[RunRequest], None]
    description: str


def _configure_logging(level: str, json_logs: bool) -> None:
    numeric = getattr(logging, level.upper(), logging.INFO)
    if json_logs:
        setup_twin_logging(level=numeric, json_output=True)
        return
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def _format_snapshot(snap: PlasmaSnapshot) -> str:
    return (
        f"{snap.elapsed_time:8.2f} | {snap.temperature / 1e6:9.2f} | "
        f"{snap.density / 1e19:9.3f} | {snap.fusion_power / 1e6:10.3f} | "
        f"{snap.stability * 100:6.2f}% | {snap.phase.value:>8}"
    )


def _format_decision(decision: Decision) -> str:
    actions = decision.actions
    return (
        f"heat={actions['heating']:<8} fuel={actions['fueling']:<10} "
        f"mag={actions['magnetic']:<9} conf={decision.confidence:.3f} "
        f"act={'yes' if decision.should_act else 'no'}"
    )


_TABLE_HEADER = " time(s) |  temp(MK) | n(1e19)   | P(MW)      | stab    |    phase"


def _echo_summary(history: tuple[PlasmaSnapshot, ...], plot_path: Optional[Path]) -> None:
    if not history:
        click.echo("No plasma history recorded.")
        return
    summary = summarize_history(history)
    click.echo(
        f"Temperature range: {summary['temperature_min'] / 1e6:.2f} - "
        f"{summary['temperature_max'] / 1e6:.2f} MK"
    )
    click.echo(
        f"Power range: {summary['fusion_power_min'] / 1e6:.3f} - "
        f"{summary['fusion_power_max'] / 1e6:.3f} MW"
    )
    click.echo(
        f"Mean stability {summary['stability_mean'] * 100:.2f}% -> barrier P="
        f"{summary['stability_probability'] * 100:.2f}% ({summary['interpretation']})"
    )
    for phase, count in summary["phase_counts"].items():
        click.echo(f"  {phase}: {count} step(s)")
    if plot_path is not None:
        saved = plot_history(history, plot_path)
        click.echo(f"Plot saved: {saved}")


def _run_twin(request: RunRequest) -> None:
    twin = DigitalTwin(request.config).initialize()
    click.echo(_TABLE_HEADER + " | decision")

    def _on_step(result: TickResult, index: int) -> None:
        del index
        if result.plasma is None:
            click.echo(f"{result.time:8.2f} | plasma disabled")
            return
        row = _format_snapshot(result.plasma.snapshot())
        if result.decision is not None:
            row += " | " + _format_decision(result.decision)
        click.echo(row)

    state = twin.run(request.steps, on_step=_on_step, delta_time=request.delta_time)
    click.echo(f"Decisions logged: {len(state.decisions)}")
    if twin.memory is not None:
        click.echo(f"Memory entries: {len(twin.memory)}")
    _echo_summary(twin.get_history(), request.plot_path)


def _run_reactor(request: RunRequest) -> None:
    sim = PlasmaSimulator(request.config.plasma.to_sim_config())
    click.echo(
        f"Reactor: {sim.cfg.reactor_type} R={sim.cfg.major_radius}m "
        f"a={sim.cfg.minor_radius}m B={sim.magnetic_field}T"
    )
    click.echo(_TABLE_HEADER)
    for _ in range(request.steps):
        sim.step(request.delta_time)
        click.echo(_format_snapshot(sim.get_history()[-1]))
    _echo_summary(sim.get_history(), request.plot_path)


def _run_decision(request: RunRequest) -> None:
    params = request.config.decision
    engine = DecisionEngine(DecisionEngineConfig(
        barrier=params.barrier,
        gamma=params.gamma,
        decision_threshold=params.decision_threshold,
    ))
    for name, state in DEMO_STATES.items():
        decision = engine.decide(state)
        click.echo(f"{name:<17} {_format_decision(decision)}")
        click.echo(f"{'':<17} {'; '.join(decision.rationale)}")
    patterns = engine.get_patterns()
    click.echo(f"Learned {len(patterns)} pattern(s):")
    for record in patterns:
        click.echo(f"  {record.key}: count={record.count} success={record.avg_score * 100:.1f}%")


MODE_SPECS: dict[str, ModeSpec] = {
    "twin": ModeSpec(_run_twin, "Full tick loop: plasma -> decision -> memory"),
    "reactor": ModeSpec(_run_reactor, "Plasma simulator only"),
    "decision": ModeSpec(_run_decision, "Decision engine on reference operating points"),
}


def _resolve_config(config_path: Optional[str]) -> TwinConfig:
    if config_path is None:
        return TwinConfig()
    try:
        return load_config(config_path)
    except FileNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc
    except ValidationError as exc:
        raise click.ClickException(f"Invalid config {config_path}: {exc}") from exc
    except ValueError as exc:
        raise click.ClickException(f"Unreadable config {config_path}: {exc}") from exc


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("mode", required=False, default="twin")
@click.option("--steps", default=DEFAULT_STEPS, show_default=True, type=click.IntRange(min=1), help="Number of ticks.")
@click.option("--dt", "delta_time", default=None, type=float, help="Tick size in seconds (default: config run_delta_time).")
@click.option("--config", "config_path", default=None, type=click.Path(dir_okay=False), help="JSON twin config.")
@click.option("--plot", "plot_path", default=None, type=click.Path(dir_okay=False), help="Save a history plot to this PNG.")
@click.option("--json-logs", is_flag=True, help="Emit structured JSON log lines.")
@click.option("--list-modes", is_flag=True, help="List available modes, then exit.")
@click.option(
    "--log-level",
    default="WARNING",
    show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="CLI log level.",
)
def cli(
    mode: str,
    steps: int,
    delta_time: Optional[float],
    config_path: Optional[str],
    plot_path: Optional[str],
    json_logs: bool,
    list_modes: bool,
    log_level: str,
) -> None:
    """TwinCosmos launcher.

    MODE is one of ``twin`` (default), ``reactor`` or ``decision``.
    """
    _configure_logging(log_level, json_logs)

    if list_modes:
        click.echo("mode | description")
        for name, spec in MODE_SPECS.items():
            click.echo(f"{name} | {spec.description}")
        return

    if mode not in MODE_SPECS:
        all_modes = ", ".join(sorted(MODE_SPECS))
        raise click.ClickException(f"Unknown mode '{mode}'. Available modes: {all_modes}")

    config = _resolve_config(config_path)
    dt = config.run_delta_time if delta_time is None else float(delta_time)
    if not dt > 0.0 or dt == float("inf"):
        raise click.ClickException("--dt must be finite and > 0.")

    LOGGER.info("mode=%s steps=%d dt=%.3g", mode, steps, dt)
    MODE_SPECS[mode].runner(RunRequest(
        config=config,
        steps=steps,
        delta_time=dt,
        plot_path=Path(plot_path) if plot_path else None,
    ))


def main() -> int:
    try:
        cli.main(standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except SystemExit as exc:
        code = exc.code if isinstance(exc.code, int) else 1
        return code
    return 0


if __name__ == "__main__":
    sys.exit(main())

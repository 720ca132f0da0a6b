"""CLI for running offline elevator bank scenarios defined in JSON configs."""
from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import structlog

from .building import Building
from .config import BuildingConfig
from .errors import ElevatorSystemError
from .log import configure_logging

logger = structlog.get_logger(__name__)

EVENT_TYPES = ("start", "stop", "request", "out_of_service", "all_out_of_service")


def build_building(config: Dict) -> Building:
    return BuildingConfig.from_dict(config.get("building", {})).build()


def _apply_scheduled_events(building: Building, events: Iterable[Dict], tick: int) -> List[Dict]:
    """Apply every event due at ``tick``; return the ones that were rejected."""
    rejected: List[Dict] = []
    for event in events:
        if event.get("tick", 0) != tick:
            continue
        kind = event.get("type")
        try:
            if kind == "start":
                building.start_system()
            elif kind == "stop":
                building.stop_system()
            elif kind == "request":
                building.add_request(event["origin"], event["destination"])
            elif kind == "out_of_service":
                building.take_elevator_out_of_service(event["elevator_id"])
            elif kind == "all_out_of_service":
                building.take_all_out_of_service()
            else:
                raise ValueError(f"Unknown event type '{kind}'. Available: {', '.join(EVENT_TYPES)}")
        except KeyError as exc:
            error = f"Event '{kind}' is missing field {exc}"
        except (ElevatorSystemError, ValueError) as exc:
            error = str(exc)
        else:
            continue
        logger.warning("scenario.event_rejected", tick=tick, scenario_event=event, error=error)
        rejected.append({"tick": tick, "event": event, "error": error})
    return rejected


def run_scenario(building: Building, config: Dict) -> Dict[str, List[Dict]]:
    duration = config.get("duration", 20)
    events = config.get("events", [])
    frames: List[Dict] = []
    rejected: List[Dict] = []

    for tick in range(duration):
        rejected.extend(_apply_scheduled_events(building, events, tick))
        building.step()
        frame = building.get_status().to_dict()
        frame["tick"] = tick + 1
        frames.append(frame)
    return {"frames": frames, "rejected": rejected}


def save_results(output_path: Optional[Path], data: Dict) -> None:
    if not output_path:
        return
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(data, indent=2))


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("config", type=Path, help="Path to a JSON scenario configuration file")
    parser.add_argument(
        "--output",
        type=Path,
        help="Optional file path to write per-tick snapshots as JSON",
    )
    parser.add_argument(
        "--show-reports",
        action="store_true",
        help="Print the elevator reports after every tick",
    )
    args = parser.parse_args(argv)

    configure_logging()
    config = json.loads(args.config.read_text())
    building = build_building(config)
    result = run_scenario(building, config)

    results = {
        "scenario": config.get("name", args.config.stem),
        "description": config.get("description"),
        "duration": config.get("duration", 20),
        **result,
    }
    save_results(args.output, results)

    print(f"Scenario: {results['scenario']}")
    if results["description"]:
        print(results["description"])
    print(f"Duration: {results['duration']} ticks")
    if args.show_reports:
        for frame in result["frames"]:
            print(f"Tick {frame['tick']} ({frame['system_status']}):")
            for elevator in frame["elevators"]:
                print(f"  {elevator['id']}: {elevator['text']}")
    for rejection in result["rejected"]:
        print(f"Rejected at tick {rejection['tick']}: {rejection['error']}")
    print(building.get_status())
    if args.output:
        print(f"Saved snapshots to {args.output}")


if __name__ == "__main__":
    main()

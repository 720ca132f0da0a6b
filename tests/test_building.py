import pytest

from liftbank import (
    Building,
    Direction,
    ElevatorSettings,
    InvalidConfiguration,
    InvalidRequest,
    InvalidTransition,
    Request,
    SystemNotAccepting,
    SystemStatus,
)


def report_text(building, elevator_id):
    return str(building.get_status().elevator_reports[elevator_id])


def test_building_initialization(building):
    status = building.get_status()
    assert status.number_of_floors == 10
    assert status.number_of_elevators == 2
    assert status.elevator_capacity == 5
    assert status.system_status is SystemStatus.OUT_OF_SERVICE
    assert all(report.is_out_of_service for report in status.elevator_reports)
    assert all(report.current_floor == 0 for report in status.elevator_reports)


@pytest.mark.parametrize(
    "floors, elevators, capacity",
    [(1, 2, 5), (3, 0, 5), (3, 2, 2), (0, 0, 0)],
)
def test_invalid_configuration_is_rejected(floors, elevators, capacity):
    with pytest.raises(InvalidConfiguration):
        Building(floors, elevators, capacity)


def test_boundary_configuration_is_accepted():
    building = Building(2, 1, 3)
    assert building.get_status().number_of_elevators == 1


def test_unknown_allocator_is_a_configuration_error():
    with pytest.raises(InvalidConfiguration):
        Building(10, 2, 5, allocator="nearest-car")


def test_start_system(building):
    assert building.start_system() is True
    status = building.get_status()
    assert status.system_status is SystemStatus.RUNNING
    assert "Waiting[Floor 0, Time 5]" in str(status)


def test_start_is_idempotent_while_running(running_building):
    assert running_building.start_system() is True
    assert running_building.status is SystemStatus.RUNNING


def test_start_after_taking_all_out_of_service(running_building):
    running_building.take_all_out_of_service()
    assert running_building.start_system() is True
    assert running_building.status is SystemStatus.RUNNING


def test_start_while_stopping_fails(running_building):
    running_building.add_request(2, 3)
    running_building.step()
    running_building.step()
    running_building.stop_system()
    with pytest.raises(InvalidTransition):
        running_building.start_system()


def test_requests_are_stored_in_order_received(running_building):
    for origin, destination in [(3, 7), (2, 6), (4, 2), (8, 2)]:
        assert running_building.add_request(origin, destination) is True
    status = running_building.get_status()
    assert [str(r) for r in status.up_requests] == ["3->7", "2->6"]
    assert [str(r) for r in status.down_requests] == ["4->2", "8->2"]
    assert (
        "Up Requests:\n - 3->7\n - 2->6\n\nDown Requests:\n - 4->2\n - 8->2\n"
        in str(status)
    )


def test_add_request_accepts_request_objects(running_building):
    running_building.add_request(Request(1, 3))
    assert running_building.get_status().up_requests == (Request(1, 3),)


def test_add_request_before_start_is_rejected(building):
    with pytest.raises(SystemNotAccepting) as excinfo:
        building.add_request(1, 3)
    assert excinfo.value.status is SystemStatus.OUT_OF_SERVICE


def test_status_check_comes_before_floor_validation(building):
    with pytest.raises(SystemNotAccepting):
        building.add_request(99, 999)


def test_add_request_while_stopping_is_rejected(running_building):
    running_building.add_request(2, 3)
    running_building.step()
    running_building.stop_system()
    with pytest.raises(SystemNotAccepting):
        running_building.add_request(1, 3)


def test_add_request_when_out_of_service_is_rejected(running_building):
    running_building.stop_system()
    running_building.step()
    assert running_building.status is SystemStatus.OUT_OF_SERVICE
    with pytest.raises(SystemNotAccepting):
        running_building.add_request(1, 3)


def test_out_of_range_request_is_rejected(running_building):
    with pytest.raises(InvalidRequest):
        running_building.add_request(3, 10)
    with pytest.raises(InvalidRequest):
        running_building.add_request(4, 4)
    status = running_building.get_status()
    assert status.up_requests == () and status.down_requests == ()


def test_allocation_sets_stops_for_first_elevator(running_building):
    for origin, destination in [(3, 7), (2, 6), (4, 2), (8, 2)]:
        running_building.add_request(origin, destination)
    running_building.step()
    report = running_building.get_status().elevator_reports[0]
    assert str(report) == "[1|^|C  ]< -- --  2  3 -- --  6  7 -- -->"
    assert report.stop_floors == (2, 3, 6, 7)
    assert report.direction is Direction.UP
    assert report.door_closed
    # the up queue was consumed, the down queue waits for a car at the top
    status = running_building.get_status()
    assert status.up_requests == ()
    assert [str(r) for r in status.down_requests] == ["4->2", "8->2"]


def test_allocation_within_capacity(running_building):
    for destination in range(2, 10):
        running_building.add_request(1, destination)
    running_building.step()
    assert (
        " - Elevator ID 0: Floor 1, Door Closed, Direction ^, "
        "Status: [1|^|C  ]< --  1  2  3  4  5  6 -- -- -->\n"
        " - Elevator ID 1: Floor 1, Door Closed, Direction ^, "
        "Status: [1|^|C  ]< --  1 -- -- -- -- --  7  8  9>\n"
    ) in str(running_building.get_status())


def test_allocation_never_exceeds_capacity():
    building = Building(10, 1, 3)
    building.start_system()
    for destination in range(2, 9):
        building.add_request(1, destination)
    building.step()
    report = building.get_status().elevator_reports[0]
    assert report.stop_floors == (1, 2, 3, 4)
    assert len(building.get_status().up_requests) == 4


def test_no_allocation_away_from_rendezvous_floors(running_building):
    running_building.add_request(3, 5)
    running_building.step()
    running_building.add_request(4, 6)
    running_building.add_request(6, 1)
    running_building.step()
    reports = running_building.get_status().elevator_reports
    # elevator 1 is still waiting at the ground floor and picks up the new up request
    assert reports[1].stop_floors == (4, 6)
    assert reports[0].stop_floors == (3, 5)
    # nobody is at the top floor, so the down request stays queued
    assert [str(r) for r in running_building.get_status().down_requests] == ["6->1"]


def test_down_requests_are_allocated_at_the_top_floor():
    building = Building(3, 1, 3)
    building.start_system()
    building.add_request(0, 2)
    # open at 0, door cycle, two floors, open at 2, door cycle
    for _ in range(1 + 3 + 2 + 1 + 3):
        building.step()
    assert report_text(building, 0) == "Waiting[Floor 2, Time 5]"
    building.add_request(1, 0)
    building.step()
    report = building.get_status().elevator_reports[0]
    assert report.direction is Direction.DOWN
    assert report.current_floor == 1
    assert report.stop_floors == (0, 1)


def test_step_elevators(running_building):
    running_building.add_request(1, 3)
    running_building.step()
    assert report_text(running_building, 0) == "[1|^|C  ]< --  1 --  3 -- -- -- -- -- -->"
    assert report_text(running_building, 1) == "Waiting[Floor 0, Time 4]"


def test_stop_system_reverses_elevators_and_clears_queues(running_building):
    running_building.add_request(1, 3)
    running_building.step()
    running_building.step()
    running_building.add_request(5, 2)
    running_building.stop_system()
    status = running_building.get_status()
    assert status.system_status is SystemStatus.STOPPING
    assert status.up_requests == () and status.down_requests == ()
    assert "Status: [1|v|O 3]< -- -- -- -- -- -- -- -- -- -->" in str(status)
    assert "Direction v" in str(status)


def test_stop_system_is_a_no_op_when_out_of_service(building):
    building.stop_system()
    assert building.status is SystemStatus.OUT_OF_SERVICE


def test_stop_system_twice_keeps_stopping(running_building):
    running_building.add_request(2, 5)
    running_building.step()
    running_building.stop_system()
    running_building.stop_system()
    assert running_building.status is SystemStatus.STOPPING


def test_stopping_until_every_elevator_reaches_ground(running_building):
    running_building.add_request(0, 4)
    # open at 0, door cycle, then up to floor 2
    for _ in range(1 + 3 + 2):
        running_building.step()
    assert running_building.get_status().elevator_reports[0].current_floor == 2
    running_building.stop_system()
    assert running_building.status is SystemStatus.STOPPING
    running_building.step()
    assert running_building.status is SystemStatus.STOPPING
    running_building.step()
    assert running_building.status is SystemStatus.OUT_OF_SERVICE
    assert all(
        str(report) == "Out of Service[Floor 0]"
        for report in running_building.get_status().elevator_reports
    )


def test_stopping_waits_for_door_cycle_at_ground_floor():
    building = Building(10, 1, 5)
    building.start_system()
    building.add_request(0, 4)
    building.step()
    assert building.get_status().elevator_reports[0].door_text() == "O 3"
    building.stop_system()
    building.step()
    building.step()
    assert building.status is SystemStatus.STOPPING
    assert report_text(building, 0) == "[0|-|O 1]< -- -- -- -- -- -- -- -- -- -->"
    building.step()
    assert building.status is SystemStatus.OUT_OF_SERVICE
    assert report_text(building, 0) == "Out of Service[Floor 0]"


def test_allocated_stops_are_dropped_when_stopping(running_building):
    running_building.add_request(2, 8)
    running_building.step()
    running_building.stop_system()
    report = running_building.get_status().elevator_reports[0]
    assert report.stop_floors == ()
    assert report.direction is Direction.DOWN


def test_out_of_service_system_is_frozen(running_building):
    running_building.add_request(4, 7)
    running_building.step()
    running_building.step()
    running_building.take_all_out_of_service()
    before = running_building.get_status()
    running_building.step()
    assert running_building.get_status() == before
    assert before.elevator_reports[0].current_floor == 2


def test_take_elevator_out_of_service(running_building):
    running_building.take_elevator_out_of_service(0)
    running_building.step()
    report = running_building.get_status().elevator_reports[0]
    assert report.is_out_of_service
    assert (
        "Floor 0, Door Open, Direction -, Status: Out of Service[Floor 0]"
        in str(running_building.get_status())
    )
    assert running_building.status is SystemStatus.RUNNING


def test_take_elevator_out_of_service_while_going_up(running_building):
    running_building.add_request(4, 7)
    running_building.step()
    running_building.step()
    running_building.take_elevator_out_of_service(0)
    running_building.step()
    report = running_building.get_status().elevator_reports[0]
    assert report.is_out_of_service
    assert report.direction is Direction.DOWN
    assert report.stop_floors == ()
    assert (
        "Floor 1, Door Closed, Direction v, "
        "Status: [1|v|C  ]< -- -- -- -- -- -- -- -- -- -->"
    ) in str(running_building.get_status())


def test_out_of_service_elevator_gets_no_allocation(running_building):
    running_building.take_elevator_out_of_service(0)
    running_building.step()
    running_building.add_request(1, 4)
    running_building.step()
    reports = running_building.get_status().elevator_reports
    assert reports[0].stop_floors == ()
    assert reports[1].stop_floors == (1, 4)


def test_unknown_elevator_id_is_ignored(running_building):
    running_building.take_elevator_out_of_service(7)
    running_building.take_elevator_out_of_service(-1)
    assert not any(r.is_out_of_service for r in running_building.get_status().elevator_reports)


def test_take_all_out_of_service(running_building):
    running_building.take_all_out_of_service()
    status = running_building.get_status()
    assert all(report.is_out_of_service for report in status.elevator_reports)
    assert status.system_status is SystemStatus.OUT_OF_SERVICE


def test_restart_readmits_elevators_where_they_stopped(running_building):
    running_building.add_request(4, 7)
    running_building.step()
    running_building.step()
    running_building.take_all_out_of_service()
    running_building.start_system()
    report = running_building.get_status().elevator_reports[0]
    assert not report.is_out_of_service
    assert str(report) == "Waiting[Floor 2, Time 5]"


def test_report_is_a_copy(running_building):
    running_building.add_request(1, 3)
    status = running_building.get_status()
    running_building.step()
    assert [str(r) for r in status.up_requests] == ["1->3"]
    assert status.elevator_reports[0].current_floor == 0


def test_independent_buildings_do_not_interfere():
    first = Building(5, 1, 3)
    second = Building(5, 1, 3)
    first.start_system()
    first.add_request(1, 2)
    assert second.status is SystemStatus.OUT_OF_SERVICE
    assert second.get_status().up_requests == ()


def test_settings_are_shared_with_elevators():
    building = Building(10, 1, 3, settings=ElevatorSettings(door_open_ticks=5, idle_wait_ticks=2))
    building.start_system()
    assert str(building.get_status().elevator_reports[0]) == "Waiting[Floor 0, Time 2]"
    building.add_request(0, 1)
    building.step()
    assert building.get_status().elevator_reports[0].door_text() == "O 5"

from factories import make_flight
from skybound.core.chart import bucket_label, bucket_size_for, build_chart_data
from skybound.core.models import DurationRange


def test_empty_input_yields_no_buckets():
    assert build_chart_data([]) == []


def test_bucket_size_has_thirty_minute_floor():
    assert bucket_size_for(300, 310) == 30
    assert bucket_size_for(300, 300) == 30
    assert bucket_size_for(100, 700) == 100
    assert bucket_size_for(100, 701) == 101


def test_bucket_label():
    assert bucket_label(240) == "4h"
    assert bucket_label(270) == "4h30m"
    assert bucket_label(45) == "0h45m"


def test_identical_durations_fall_in_one_bucket():
    flights = [make_flight("a", price=100, minutes=300), make_flight("b", price=201, minutes=300)]
    chart = build_chart_data(flights)

    assert len(chart) == 1
    bucket = chart[0]
    assert (bucket.min_minutes, bucket.max_minutes) == (300, 330)
    assert bucket.name == "5h"
    assert bucket.count == 2
    assert bucket.avg == 151  # 150.5 rounds up
    assert (bucket.min_price, bucket.max_price) == (100, 201)


def test_buckets_cover_every_flight_and_skip_empty_ones():
    minutes = [100, 120, 250, 260, 690, 700]
    flights = [make_flight(str(i), price=100 + i, minutes=m) for i, m in enumerate(minutes)]
    chart = build_chart_data(flights)

    # size = 100: starts 100, 200, ..., 700
    assert [b.min_minutes for b in chart] == [100, 200, 600, 700]
    assert sum(b.count for b in chart) == len(flights)
    for flight in flights:
        d = flight.outbound.duration_minutes
        owners = [b for b in chart if b.min_minutes <= d < b.max_minutes]
        assert len(owners) == 1


def test_max_duration_lands_in_last_bucket():
    flights = [make_flight("short", minutes=60), make_flight("long", minutes=660)]
    chart = build_chart_data(flights)

    assert [b.min_minutes for b in chart] == [60, 660]
    assert chart[-1].max_minutes == 760
    assert chart[-1].count == 1


def test_bucket_converts_to_duration_range():
    chart = build_chart_data([make_flight("a", minutes=90)])
    assert chart[0].to_duration_range() == DurationRange(90, 120)

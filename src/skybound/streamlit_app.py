import streamlit as st
from datetime import date, timedelta

from skybound.core.constants import INITIAL_FILTERS, MAX_COMPARED_FLIGHTS
from skybound.core.guidance import compare_flights, format_flight_label
from skybound.core.models import SearchCriteria, SortOption
from skybound.core.pagination import page_window, paginate
from skybound.core.pipeline import available_airlines, build_results_view, max_possible_price
from skybound.providers.base import ProviderError, pushdown_filters
from skybound.providers.factory import get_provider
from skybound.search_history_store import SqliteSearchHistoryStore
from skybound.services.offer_bridge import (
    chart_to_dataframe,
    comparison_dataframe,
    flights_to_dataframe,
)
from skybound.settings import configure_logging, load_settings

ALL_DURATIONS = "All durations"

st.set_page_config(
    page_title="SkyBound",
    layout="wide",
)


@st.cache_resource
def load_app():
    """
    Settings, logging and the history store are created once per process.
    """
    settings = load_settings()
    configure_logging(settings.log_level)
    return settings, SqliteSearchHistoryStore(settings.history_db_path)


settings, history = load_app()


@st.cache_data(ttl=600, show_spinner=False)
def lookup_locations(provider_name: str, keyword: str):
    try:
        return get_provider(provider_name, settings).search_locations(keyword)
    except ProviderError:
        return []


state = st.session_state
state.setdefault("criteria", None)
state.setdefault("flights", [])
state.setdefault("all_airlines", [])
state.setdefault("price_ceiling", INITIAL_FILTERS.max_price)
state.setdefault("pushed", pushdown_filters(INITIAL_FILTERS))
state.setdefault("duration_range", None)
state.setdefault("bucket_ranges", {})
state.setdefault("page", 1)
state.setdefault("compared", [])
state.setdefault("error", None)

# Widget-backed state.
state.setdefault("filter_stops", [])
state.setdefault("filter_airlines", [])
state.setdefault("filter_max_price", state.price_ceiling)
state.setdefault("sort_by", SortOption.PRICE_ASC)
state.setdefault("duration_bucket", ALL_DURATIONS)


def reset_page():
    state.page = 1


def clear_filters():
    state.filter_stops = []
    state.filter_airlines = []
    state.filter_max_price = state.price_ceiling
    state.duration_bucket = ALL_DURATIONS
    state.duration_range = None
    state.page = 1


def pick_duration_bucket():
    state.duration_range = state.bucket_ranges.get(state.duration_bucket)
    state.page = 1


def location_input(col, label: str, default: str) -> str:
    """
    Free-text query plus the provider's suggestions for it.
    Falls back to the typed text when nothing matches.
    """
    query = col.text_input(label, default, key=f"{label.lower()}_query")
    suggestions = lookup_locations(settings.provider, query)
    if not suggestions:
        return query.strip().upper()
    picked = col.selectbox(
        f"{label} airport",
        options=suggestions,
        format_func=lambda s: s.label,
        label_visibility="collapsed",
    )
    return picked.iata_code


st.title("✈️ SkyBound")

last = history.last()
today = date.today()

col_o, col_d, col_dep, col_ret, col_pax = st.columns(5)
origin = location_input(col_o, "From", last.origin if last else "JFK")
destination = location_input(col_d, "To", last.destination if last else "LHR")
departure_date = col_dep.date_input(
    "Departure", value=today + timedelta(days=14), min_value=today)
round_trip = col_ret.checkbox("Round trip", value=bool(last and last.return_date))
return_date = col_ret.date_input(
    "Return", value=departure_date + timedelta(days=7), min_value=departure_date)
passengers = col_pax.number_input(
    "Passengers", min_value=1, value=last.passengers if last else 1, step=1)

if st.button("Search", key="search"):
    criteria = SearchCriteria(
        origin=origin,
        destination=destination,
        departure_date=departure_date.isoformat(),
        return_date=return_date.isoformat() if round_trip else None,
        passengers=int(passengers),
    )
    state.criteria = None
    state.compared = []
    state.error = None
    try:
        provider = get_provider(settings=settings)
        flights = provider.search(criteria, INITIAL_FILTERS)
        history.record(criteria)
    except (ProviderError, ValueError) as exc:
        flights = []
        state.error = str(exc) or "The search engine encountered an issue."

    state.flights = flights
    state.pushed = pushdown_filters(INITIAL_FILTERS)
    state.all_airlines = available_airlines(flights)
    state.price_ceiling = max_possible_price(flights)
    clear_filters()
    if flights:
        state.criteria = criteria
    elif state.error is None:
        state.error = "Zero results found. Try routes like JFK-LHR or CDG-JFK."

if state.error:
    st.error(state.error)

if state.criteria is not None:
    with st.sidebar:
        st.header("Filters")
        st.multiselect(
            "Stops",
            options=[0, 1, 2],
            format_func=lambda s: {0: "Direct", 1: "1 stop", 2: "2+ stops"}[s],
            key="filter_stops",
            on_change=reset_page,
        )
        st.multiselect(
            "Airlines",
            options=state.all_airlines,
            key="filter_airlines",
            on_change=reset_page,
        )
        st.slider(
            "Max price",
            min_value=0.0,
            max_value=float(state.price_ceiling),
            key="filter_max_price",
            on_change=reset_page,
        )
        st.selectbox(
            "Sort",
            options=list(SortOption),
            format_func=lambda o: o.label,
            key="sort_by",
            on_change=reset_page,
        )
        st.button("Clear filters", key="clear_filters", on_click=clear_filters)

    filters = INITIAL_FILTERS.replace(
        stops=state.filter_stops,
        airlines=state.filter_airlines,
        max_price=state.filter_max_price,
        duration_range=state.duration_range,
    )

    # Stops and carriers are applied upstream, so a change there re-runs the search.
    if pushdown_filters(filters) != state.pushed:
        try:
            state.flights = get_provider(settings=settings).search(state.criteria, filters)
            state.error = None
        except (ProviderError, ValueError) as exc:
            state.flights = []
            st.error(str(exc) or "The search engine encountered an issue.")
        state.pushed = pushdown_filters(filters)

    view = build_results_view(state.flights, filters, state.sort_by)

    st.subheader("Price by outbound duration")
    chart_df = chart_to_dataframe(view.chart)
    state.bucket_ranges = {b.name: b.to_duration_range() for b in view.chart}
    if not chart_df.empty:
        st.bar_chart(chart_df["avg_price"])
        labels = [ALL_DURATIONS] + list(state.bucket_ranges)
        if state.duration_bucket not in labels:
            state.duration_bucket = ALL_DURATIONS
            state.duration_range = None
        st.radio(
            "Duration bucket",
            labels,
            horizontal=True,
            key="duration_bucket",
            on_change=pick_duration_bucket,
        )

    count = len(view.flights)
    st.markdown(f"### {count} {'Option' if count == 1 else 'Options'} Found")

    page = paginate(view.flights, state.page, settings.page_size)
    for flight in page.items:
        badges = " ".join(f"`{b}`" for b in view.guidance.badges_for(flight.id))
        col_l, col_p, col_c = st.columns([4, 1, 1])
        with col_l:
            st.write(f"{format_flight_label(flight)} {badges}")
            st.caption(
                f"{flight.outbound.departure_time} → {flight.outbound.arrival_time}"
                f" · {flight.outbound.duration} · {flight.outbound.stops} stop(s)"
            )
        col_p.metric("Total", f"{flight.price:,.0f} {flight.currency}")
        compared = flight.id in state.compared
        if col_c.checkbox(
            "Compare",
            value=compared,
            key=f"cmp-{flight.id}",
            disabled=not compared and len(state.compared) >= MAX_COMPARED_FLIGHTS,
        ) != compared:
            state.compared = (
                [i for i in state.compared if i != flight.id] if compared else state.compared + [flight.id]
            )
            st.rerun()

    if page.total_pages > 1:
        pager = st.columns(len(page_window(page.page, page.total_pages)))
        for col, num in zip(pager, page_window(page.page, page.total_pages)):
            if col.button(str(num), disabled=num == page.page, key=f"page-{num}"):
                state.page = num
                st.rerun()

    selected = compare_flights(state.flights, state.compared, MAX_COMPARED_FLIGHTS)
    if len(selected) == MAX_COMPARED_FLIGHTS:
        st.subheader("Comparison")
        st.dataframe(comparison_dataframe(selected), width="stretch")

    with st.expander("All results (table)"):
        st.dataframe(flights_to_dataframe(view.flights, view.guidance), width="stretch")
else:
    st.info("Search a route to see flight options. 🚀")

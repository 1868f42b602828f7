"""Weather App - Streamlit Frontend."""

import httpx
import streamlit as st

st.set_page_config(
    page_title="Weather App",
    page_icon="🌦️",
    layout="wide",
)

ICON_EMOJI = {
    "clear.png": "☀️",
    "partly-cloudy.png": "⛅",
    "cloudy.png": "☁️",
    "rain.png": "🌧️",
    "thunderstorm.png": "⛈️",
    "snow.png": "❄️",
    "mist.png": "🌫️",
}

# Initialize session state
if "city" not in st.session_state:
    st.session_state.city = "Towson"
if "weather" not in st.session_state:
    st.session_state.weather = None
if "favorite_day" not in st.session_state:
    st.session_state.favorite_day = None
if "tips" not in st.session_state:
    st.session_state.tips = None
if "error" not in st.session_state:
    st.session_state.error = None
if "http" not in st.session_state:
    # One client per UI session so the server's session cookie sticks
    st.session_state.http = httpx.Client(timeout=30)


def icon_emoji(icon: str | None) -> str:
    return ICON_EMOJI.get(icon or "", ICON_EMOJI["cloudy.png"])


def search_cities(server_url: str, query: str) -> list[dict]:
    """Fetch city suggestions; errors yield no suggestions."""
    if len(query) < 2 or "," in query:
        return []
    try:
        response = st.session_state.http.get(f"{server_url}/api/cities", params={"q": query})
        response.raise_for_status()
        data = response.json()
        return data if isinstance(data, list) else []
    except (httpx.HTTPError, ValueError):
        return []


def fetch_weather(server_url: str, city: str) -> dict:
    """Fetch the weather bundle for a city."""
    try:
        response = st.session_state.http.get(f"{server_url}/api/weather", params={"city": city})
        data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        return {"success": False, "error": f"Failed to load weather data: {e}"}

    if response.is_error or "error" in data:
        return {"success": False, "error": data.get("message") or data.get("error")}
    if not all(key in data for key in ("current", "hourly", "daily")):
        return {"success": False, "error": "Invalid weather data format"}
    return {"success": True, "data": data}


def fetch_tips(server_url: str, weather: dict | None, favorite_day: int | None) -> str:
    """Ask the server for tips about the current bundle."""
    try:
        response = st.session_state.http.post(
            f"{server_url}/api/ai-weather",
            json={"weatherData": weather, "favoriteDay": favorite_day},
        )
        response.raise_for_status()
        return response.json().get("aiResponse") or "Couldn't get weather tips right now."
    except (httpx.HTTPError, ValueError):
        return "Weather assistant unavailable. Please try again later."


def load_city(server_url: str, city: str) -> None:
    result = fetch_weather(server_url, city)
    if result["success"]:
        st.session_state.city = city
        st.session_state.weather = result["data"]
        st.session_state.favorite_day = None
        st.session_state.tips = None
        st.session_state.error = None
    else:
        st.session_state.error = result["error"]


def toggle_favorite(index: int) -> None:
    current = st.session_state.favorite_day
    st.session_state.favorite_day = None if current == index else index


def render_current(current: dict) -> None:
    st.header(f"{icon_emoji(current.get('icon'))} {current.get('city', '')}")
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Temperature", f"{current.get('temp', '--')}°F", current.get("condition"))
    col2.metric("High / Low", f"H:{current.get('high', '--')}° L:{current.get('low', '--')}°")
    col3.metric("Wind", f"{current.get('wind', '--')} mph")
    col4.metric("Humidity", f"{current.get('humidity', '--')}%")


def render_hourly(hourly: list[dict]) -> None:
    st.subheader("Hourly")
    if not hourly:
        st.caption("No hourly forecast available.")
        return
    for column, hour in zip(st.columns(len(hourly)), hourly):
        with column:
            st.markdown(f"**{hour.get('time') or '--:--'}**")
            st.markdown(f"{icon_emoji(hour.get('icon'))} {hour.get('temp', '--')}°")


def render_daily(daily: list[dict], favorite_day: int | None) -> None:
    st.subheader("Daily")
    if not daily:
        st.caption("No daily forecast available.")
        return
    for index, day in enumerate(daily):
        name = "Today" if index == 0 else day.get("day") or "Day"
        star = "⭐ " if index == favorite_day else ""
        high = round(day["high"]) if day.get("high") is not None else "--"
        low = round(day["low"]) if day.get("low") is not None else "--"
        st.button(
            f"{star}{name}  {icon_emoji(day.get('icon'))}  H:{high}° L:{low}°",
            key=f"day_{index}",
            on_click=toggle_favorite,
            args=(index,),
            use_container_width=True,
        )


# Sidebar - Connection and search
with st.sidebar:
    st.title("🌦️ Weather App")
    st.divider()

    server_url = st.text_input(
        "Server URL",
        value="http://localhost:3000",
        placeholder="http://localhost:3000",
    ).rstrip("/")

    query = st.text_input("Search US cities...", value=st.session_state.city)
    suggestions = search_cities(server_url, query.strip())
    if suggestions:
        labels = [city["fullName"] for city in suggestions]
        choice = st.selectbox("Matching cities", labels)
        if st.button("Show weather", use_container_width=True):
            load_city(server_url, choice)
            st.rerun()
    elif query.strip() and st.button("Show weather", use_container_width=True):
        load_city(server_url, query.strip())
        st.rerun()

    st.divider()
    if st.button("💡 Get Weather Tips", use_container_width=True):
        if st.session_state.weather is None:
            load_city(server_url, st.session_state.city)
        with st.spinner("Thinking..."):
            st.session_state.tips = fetch_tips(
                server_url,
                st.session_state.weather,
                st.session_state.favorite_day,
            )


# Main content
if st.session_state.weather is None and st.session_state.error is None:
    load_city(server_url, st.session_state.city)

if st.session_state.error:
    st.error(st.session_state.error)

if st.session_state.weather:
    weather = st.session_state.weather
    render_current(weather["current"])
    st.divider()
    render_hourly(weather["hourly"])
    st.divider()
    render_daily(weather["daily"], st.session_state.favorite_day)

if st.session_state.tips:
    st.divider()
    st.subheader("🌦️ Weather Assistant")
    st.text(st.session_state.tips)

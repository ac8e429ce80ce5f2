from core.models import WeatherData
from modules.home import weather_card_html


def test_weather_card_escapes_model_text():
    """
    Regression test:
    markup in model-generated weather fields is rendered as text
    """
    weather = WeatherData(
        temp=18.4,
        condition="<b>cloudy</b>",
        location="Seoul <script>alert(1)</script>",
        description='Mild & "grey"',
    )

    card = weather_card_html(weather)

    assert "<script>" not in card
    assert "<b>" not in card
    assert "Seoul &lt;script&gt;alert(1)&lt;/script&gt;" in card
    assert "Mild &amp; &quot;grey&quot;" in card
    assert "18°C" in card

"""
Integration tests for the v1 API routes.
"""

from palettesmith.services.colors.space import hsl_to_hex
from palettesmith.utils.metrics import get_metrics


class TestConvertEndpoint:

    def test_hex_to_rgb(self, test_client):
        response = test_client.post("/v1/convert", json={
            "value": "#FF0000", "from_space": "hex", "to_space": "rgb"
        })
        assert response.status_code == 200
        data = response.json()
        assert data["value"] == [255, 0, 0]
        assert data["hex"] == "#FF0000"

    def test_hsl_to_hex(self, test_client):
        response = test_client.post("/v1/convert", json={
            "value": [120, 100, 50], "from_space": "hsl", "to_space": "hex"
        })
        assert response.status_code == 200
        assert response.json()["value"] == "#00FF00"

    def test_unknown_space_is_rejected(self, test_client):
        response = test_client.post("/v1/convert", json={
            "value": "#FF0000", "from_space": "hex", "to_space": "xyz"
        })
        assert response.status_code == 422

    def test_invalid_color_is_400(self, test_client):
        response = test_client.post("/v1/convert", json={
            "value": "#GGG", "from_space": "hex", "to_space": "rgb"
        })
        assert response.status_code == 400
        assert get_metrics().get_counters()["failed_total_invalid_color"] == 1

    def test_out_of_range_channel_is_400(self, test_client):
        response = test_client.post("/v1/convert", json={
            "value": [300, 0, 0], "from_space": "rgb", "to_space": "hex"
        })
        assert response.status_code == 400


class TestContrastEndpoints:

    def test_black_on_white(self, test_client):
        response = test_client.post("/v1/contrast", json={
            "foreground": "#000000", "background": "#fff"
        })
        assert response.status_code == 200
        data = response.json()
        assert data["ratio"] == 21.0
        assert data["level"] == "AAA"
        assert data["background"] == "#FFFFFF"

    def test_ensure_contrast(self, test_client):
        response = test_client.post("/v1/contrast/ensure", json={
            "foreground": "#FFFFFF", "background": "#FFFFFF", "target": 4.5
        })
        assert response.status_code == 200
        data = response.json()
        assert data["ratio"] >= 4.5
        assert data["fell_back"] is False

    def test_fallback_is_counted(self, test_client):
        response = test_client.post("/v1/contrast/ensure", json={
            "foreground": "#808080", "background": "#808080", "target": 21
        })
        assert response.status_code == 200
        assert response.json()["fell_back"] is True
        assert get_metrics().get_counters()["fallback_total_contrast"] == 1

    def test_target_out_of_range(self, test_client):
        response = test_client.post("/v1/contrast/ensure", json={
            "foreground": "#000000", "background": "#FFFFFF", "target": 30
        })
        assert response.status_code == 422

    def test_invalid_color(self, test_client):
        response = test_client.post("/v1/contrast", json={
            "foreground": "tomato", "background": "#FFFFFF"
        })
        assert response.status_code == 400


class TestPaletteEndpoints:

    def test_triadic(self, test_client):
        response = test_client.post("/v1/palette", json={
            "base": "#FF0000", "mode": "triadic", "count": 3
        })
        assert response.status_code == 200
        data = response.json()
        assert data["colors"] == ["#FF0000", "#00FF00", "#0000FF"]
        assert data["mode"] == "triadic"
        assert data["fallback_used"] is False

    def test_locked_entries(self, test_client):
        response = test_client.post("/v1/palette", json={
            "base": "#FF0000", "mode": "triadic", "count": 3,
            "locked": [{"index": 1, "hex": "#123456"}]
        })
        assert response.json()["colors"][1] == "#123456"

    def test_unknown_mode_falls_back(self, test_client):
        response = test_client.post("/v1/palette", json={"base": "#3366CC", "mode": "plaid"})
        assert response.status_code == 200
        data = response.json()
        assert data["mode"] == "monochromatic"
        assert data["fallback_used"] is True
        assert len(data["colors"]) == 5
        assert get_metrics().get_counters()["fallback_total_harmony_mode"] == 1

    def test_seeded_random_is_reproducible(self, test_client):
        body = {"base": "#3366CC", "mode": "random", "count": 6, "seed": 11}
        first = test_client.post("/v1/palette", json=body).json()
        second = test_client.post("/v1/palette", json=body).json()
        assert first["colors"] == second["colors"]

    def test_count_limits(self, test_client):
        assert test_client.post("/v1/palette", json={"base": "#3366CC", "count": 1000}).status_code == 422
        assert test_client.post("/v1/palette", json={"base": "#3366CC", "count": -1}).status_code == 422
        response = test_client.post("/v1/palette", json={"base": "#3366CC", "count": 0})
        assert response.json()["colors"] == []

    def test_invalid_base(self, test_client):
        response = test_client.post("/v1/palette", json={"base": "nope"})
        assert response.status_code == 400

    def test_random_spec(self, test_client):
        first = test_client.post("/v1/palette/random-spec", json={"seed": 3}).json()
        second = test_client.post("/v1/palette/random-spec", json={"seed": 3}).json()
        assert first == second
        cranked = test_client.post("/v1/palette/random-spec", json={"seed": 3, "crank_apocalypse": True}).json()
        assert cranked["harmony"] == "Apocalypse"
        assert cranked["apocalypse_intensity"] == 150
        assert cranked["base_color"] == first["base_color"]


class TestTokensEndpoint:

    def test_tokens(self, test_client):
        response = test_client.post("/v1/tokens", json={
            "base_color": "#3366CC", "harmony": "Analogous", "theme_mode": "Dark"
        })
        assert response.status_code == 200
        data = response.json()
        assert "brand" in data["groups"]
        assert "primary" in data["groups"]["brand"]
        assert data["swatch_stack"][0]["name"] == "Primary"

    def test_on_colors_and_print(self, test_client):
        response = test_client.post("/v1/tokens", json={
            "base_color": "#3366CC", "include_on_colors": True, "include_print": True,
            "intensities": {"pop": 120}
        })
        groups = response.json()["groups"]
        assert groups["brand"]["on-primary"] in ("#000000", "#FFFFFF")
        assert groups["print"]["meta/base-color"] == "#3366CC"

    def test_invalid_base(self, test_client):
        response = test_client.post("/v1/tokens", json={"base_color": "#12"})
        assert response.status_code == 400


class TestSwatchesEndpoint:

    def test_reduce(self, test_client):
        response = test_client.post("/v1/swatches/reduce", json={
            "swatches": [
                {"name": "Red", "hex": "#FF0000"},
                {"name": "Red again", "hex": "#FF0001"},
                {"name": "Red", "hex": "#0000FF"},
            ]
        })
        assert response.status_code == 200
        data = response.json()
        assert [s["name"] for s in data["swatches"]] == ["Red", "Red (2)"]
        assert data["dropped"] == 1

    def test_no_default_truncation(self, test_client):
        swatches = [
            {"name": f"Hue {hue}", "hex": hsl_to_hex(hue, 100, lightness)}
            for hue in range(0, 360, 18) for lightness in (35, 65)
        ]
        response = test_client.post("/v1/swatches/reduce", json={"swatches": swatches})
        assert response.status_code == 200
        data = response.json()
        assert len(data["swatches"]) == 40
        assert data["dropped"] == 0

    def test_explicit_max_colors(self, test_client):
        response = test_client.post("/v1/swatches/reduce", json={
            "swatches": [{"name": "Red", "hex": "#FF0000"}, {"name": "Blue", "hex": "#0000FF"}],
            "max_colors": 1
        })
        assert [s["name"] for s in response.json()["swatches"]] == ["Red"]

    def test_invalid_swatch(self, test_client):
        response = test_client.post("/v1/swatches/reduce", json={
            "swatches": [{"name": "Bad", "hex": "#GGGGGG"}]
        })
        assert response.status_code == 400


class TestVisionEndpoint:

    def test_achromatopsia(self, test_client):
        response = test_client.post("/v1/vision", json={
            "colors": ["#FF0000", "rgb(255, 255, 255)"], "mode": "Achromatopsia"
        })
        assert response.status_code == 200
        data = response.json()
        assert data["mode"] == "achromatopsia"
        assert data["colors"] == ["#FF0000", "#FFFFFF"]
        assert data["simulated"] == ["#4C4C4C", "#FFFFFF"]

    def test_unknown_mode_is_rejected(self, test_client):
        response = test_client.post("/v1/vision", json={"colors": ["#FF0000"], "mode": "x-ray"})
        assert response.status_code == 422

    def test_invalid_color(self, test_client):
        response = test_client.post("/v1/vision", json={"colors": ["#12"], "mode": "protanopia"})
        assert response.status_code == 400


class TestMetricsEndpoint:

    def test_metrics_summary(self, test_client):
        test_client.post("/v1/palette", json={"base": "#3366CC", "mode": "triadic", "count": 4})
        response = test_client.get("/v1/metrics")
        assert response.status_code == 200
        data = response.json()
        assert data["counters"]["requests_total"] == 1
        assert data["counters"]["palette_mode_used_total_triadic"] == 1
        assert data["palette_size_stats"]["count"] == 1
        assert "palette_duration_ms" in data["timing_stats"]

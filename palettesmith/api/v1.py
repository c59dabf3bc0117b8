"""
Palettesmith v1 API Routes
Exposes conversion, contrast, palette, theme token, swatch and vision operations.
"""
import random
import time
from typing import Any, Dict

from fastapi import APIRouter, HTTPException

from palettesmith.config import config
from palettesmith.schemas import (
    ContrastRequest, ContrastResponse, ConvertRequest, ConvertResponse,
    EnsureContrastRequest, EnsureContrastResponse, MetricsResponse, NamedColor,
    PaletteRequest, PaletteResponse, RandomSpecRequest, RandomSpecResponse,
    SwatchReduceRequest, SwatchReduceResponse, TokensRequest, TokensResponse,
    VisionRequest, VisionResponse
)
from palettesmith.services.colors.contrast import solve_contrast, wcag_level
from palettesmith.services.colors.harmony import GoldenRatioSequence, HarmonyMode, generate_palette
from palettesmith.services.colors.harmony.specs import crank_apocalypse, generate_random_palette_spec
from palettesmith.services.colors.space import (
    InvalidColorFormat, contrast_ratio, convert, delta_e, display_contrast_ratio, parse_color
)
from palettesmith.services.colors.swatches import build_swatch_stack, reduce_swatches
from palettesmith.services.colors.tokens import (
    ThemeIntensities, add_on_colors, add_print_tokens, generate_theme
)
from palettesmith.services.colors.vision import simulate_palette
from palettesmith.utils.ids import generate_request_id
from palettesmith.utils.logging import logger
from palettesmith.utils.metrics import get_metrics

router = APIRouter(prefix="/v1", tags=["Palettesmith"])


def _elapsed_ms(start_time: float) -> float:
    return round((time.time() - start_time) * 1000, 2)


def _invalid_color(operation: str, request_id: str, start_time: float, error: InvalidColorFormat) -> HTTPException:
    logger.warning(f"{operation} request {request_id} rejected", extra={
        "request_id": request_id,
        "error": str(error),
        "error_time_ms": _elapsed_ms(start_time)
    })
    get_metrics().increment_failure_count("invalid_color")
    return HTTPException(status_code=400, detail=str(error))


def _internal_error(operation: str, request_id: str, start_time: float, error: Exception) -> HTTPException:
    logger.error(f"{operation} request {request_id} failed", extra={
        "request_id": request_id,
        "error": str(error),
        "error_time_ms": _elapsed_ms(start_time)
    })
    get_metrics().increment_failure_count("internal")
    return HTTPException(status_code=500, detail=f"Internal error during {operation}")


def _record_success(operation: str, request_id: str, start_time: float, extra: Dict[str, Any]):
    duration_ms = _elapsed_ms(start_time)
    logger.info(f"{operation} request {request_id} completed", extra={
        "request_id": request_id,
        "total_time_ms": duration_ms,
        **extra
    })
    get_metrics().record_timing(operation, duration_ms)


@router.post("/convert", response_model=ConvertResponse,
             summary="Convert Color",
             description="Convert a color between hex, rgb, hsl, cmyk, lab and oklch")
async def convert_color(request: ConvertRequest) -> ConvertResponse:
    request_id = generate_request_id()
    start_time = time.time()
    get_metrics().increment_request_count("convert")

    logger.info(f"convert request {request_id} started", extra={
        "request_id": request_id,
        "from_space": request.from_space,
        "to_space": request.to_space
    })

    try:
        result = convert(request.value, request.from_space, request.to_space)
        hex_value = convert(request.value, request.from_space, "hex")
        value = result if isinstance(result, str) else [float(v) for v in result]

        _record_success("convert", request_id, start_time, {"hex": hex_value})
        return ConvertResponse(
            from_space=request.from_space,
            to_space=request.to_space,
            value=value,
            hex=hex_value
        )

    except InvalidColorFormat as e:
        raise _invalid_color("convert", request_id, start_time, e)

    except HTTPException:
        raise

    except Exception as e:
        raise _internal_error("convert", request_id, start_time, e)


@router.post("/contrast", response_model=ContrastResponse,
             summary="Contrast Ratio",
             description="WCAG 2.1 contrast ratio, conformance level and LAB distance for two colors")
async def check_contrast(request: ContrastRequest) -> ContrastResponse:
    request_id = generate_request_id()
    start_time = time.time()
    get_metrics().increment_request_count("contrast")

    logger.info(f"contrast request {request_id} started", extra={
        "request_id": request_id,
        "foreground": request.foreground,
        "background": request.background
    })

    try:
        foreground = parse_color(request.foreground)
        background = parse_color(request.background)
        ratio = contrast_ratio(foreground, background)

        _record_success("contrast", request_id, start_time, {"ratio": ratio})
        return ContrastResponse(
            foreground=foreground,
            background=background,
            ratio=display_contrast_ratio(foreground, background),
            level=wcag_level(ratio).value,
            delta_e=round(delta_e(foreground, background), 2)
        )

    except InvalidColorFormat as e:
        raise _invalid_color("contrast", request_id, start_time, e)

    except HTTPException:
        raise

    except Exception as e:
        raise _internal_error("contrast", request_id, start_time, e)


@router.post("/contrast/ensure", response_model=EnsureContrastResponse,
             summary="Ensure Contrast",
             description="Adjust foreground lightness until it meets a contrast target")
async def ensure_contrast_route(request: EnsureContrastRequest) -> EnsureContrastResponse:
    request_id = generate_request_id()
    start_time = time.time()
    metrics = get_metrics()
    metrics.increment_request_count("contrast_ensure")

    logger.info(f"contrast_ensure request {request_id} started", extra={
        "request_id": request_id,
        "foreground": request.foreground,
        "background": request.background,
        "target": request.target
    })

    try:
        result = solve_contrast(
            parse_color(request.foreground),
            parse_color(request.background),
            request.target,
            request.prefer_lighten
        )
        if result.fell_back:
            metrics.increment_fallback_count("contrast")

        _record_success("contrast_ensure", request_id, start_time, {
            "color": result.color,
            "steps": result.steps,
            "fell_back": result.fell_back
        })
        return EnsureContrastResponse(
            color=result.color,
            ratio=round(result.ratio, 2),
            steps=result.steps,
            fell_back=result.fell_back
        )

    except InvalidColorFormat as e:
        raise _invalid_color("contrast_ensure", request_id, start_time, e)

    except HTTPException:
        raise

    except Exception as e:
        raise _internal_error("contrast_ensure", request_id, start_time, e)


@router.post("/palette", response_model=PaletteResponse,
             summary="Harmony Palette",
             description="Generate a palette from a base color under a harmony mode")
async def create_palette(request: PaletteRequest) -> PaletteResponse:
    request_id = generate_request_id()
    start_time = time.time()
    metrics = get_metrics()
    metrics.increment_request_count("palette")

    logger.info(f"palette request {request_id} started", extra={
        "request_id": request_id,
        "mode": request.mode,
        "count": request.count,
        "locked": len(request.locked)
    })

    try:
        mode = HarmonyMode.from_tag(request.mode)
        fallback_used = not HarmonyMode.is_known(request.mode)
        if fallback_used:
            metrics.increment_fallback_count("harmony_mode")
        metrics.increment_mode_count(mode.value)

        sequence = GoldenRatioSequence.seeded(request.seed) if request.seed is not None else None
        colors = generate_palette(
            mode,
            request.base,
            request.count,
            locked=[(entry.index, entry.hex) for entry in request.locked],
            sequence=sequence
        )
        metrics.record_palette_size(len(colors))

        _record_success("palette", request_id, start_time, {
            "mode": mode.value,
            "colors": len(colors)
        })
        return PaletteResponse(
            mode=mode.value,
            base=parse_color(request.base),
            colors=colors,
            fallback_used=fallback_used
        )

    except InvalidColorFormat as e:
        raise _invalid_color("palette", request_id, start_time, e)

    except HTTPException:
        raise

    except Exception as e:
        raise _internal_error("palette", request_id, start_time, e)


@router.post("/palette/random-spec", response_model=RandomSpecResponse,
             summary="Random Theme Spec",
             description="Draw random theme inputs, optionally cranked to full Apocalypse")
async def random_spec(request: RandomSpecRequest) -> RandomSpecResponse:
    request_id = generate_request_id()
    start_time = time.time()
    get_metrics().increment_request_count("random_spec")

    logger.info(f"random_spec request {request_id} started", extra={
        "request_id": request_id,
        "seed": request.seed,
        "crank_apocalypse": request.crank_apocalypse
    })

    try:
        spec = generate_random_palette_spec(random.Random(request.seed))
        if request.crank_apocalypse:
            spec = crank_apocalypse(spec)

        _record_success("random_spec", request_id, start_time, {"harmony": spec.harmony.value})
        return RandomSpecResponse(
            base_color=spec.base_color,
            harmony=spec.harmony.value,
            theme_mode=spec.theme_mode.value,
            harmony_intensity=spec.harmony_intensity,
            apocalypse_intensity=spec.apocalypse_intensity,
            neutral_curve=spec.neutral_curve,
            accent_strength=spec.accent_strength,
            pop_intensity=spec.pop_intensity
        )

    except HTTPException:
        raise

    except Exception as e:
        raise _internal_error("random_spec", request_id, start_time, e)


@router.post("/tokens", response_model=TokensResponse,
             summary="Theme Tokens",
             description="Derive a full design token set from a base color")
async def create_tokens(request: TokensRequest) -> TokensResponse:
    request_id = generate_request_id()
    start_time = time.time()
    get_metrics().increment_request_count("tokens")

    logger.info(f"tokens request {request_id} started", extra={
        "request_id": request_id,
        "harmony": request.harmony,
        "theme_mode": request.theme_mode
    })

    try:
        intensities = ThemeIntensities(**request.intensities.model_dump())
        tokens = generate_theme(
            request.base_color,
            harmony=request.harmony,
            theme_mode=request.theme_mode,
            intensities=intensities
        )
        if request.include_on_colors:
            tokens = add_on_colors(tokens)
        if request.include_print:
            tokens = add_print_tokens(tokens, parse_color(request.base_color), request.theme_mode == "dark")

        stack = [
            {"name": entry.name, "path": entry.path, "hex": entry.hex}
            for entry in build_swatch_stack(tokens)
        ]

        _record_success("tokens", request_id, start_time, {"groups": len(tokens.groups)})
        return TokensResponse(base_hue=tokens.base_hue, groups=tokens.groups, swatch_stack=stack)

    except InvalidColorFormat as e:
        raise _invalid_color("tokens", request_id, start_time, e)

    except HTTPException:
        raise

    except Exception as e:
        raise _internal_error("tokens", request_id, start_time, e)


@router.post("/swatches/reduce", response_model=SwatchReduceResponse,
             summary="Reduce Swatches",
             description="Collapse near duplicates, throttle neutrals and make names unique")
async def reduce_swatches_route(request: SwatchReduceRequest) -> SwatchReduceResponse:
    request_id = generate_request_id()
    start_time = time.time()
    get_metrics().increment_request_count("swatches_reduce")

    logger.info(f"swatches_reduce request {request_id} started", extra={
        "request_id": request_id,
        "swatches": len(request.swatches),
        "cap": request.cap,
        "threshold": request.threshold
    })

    try:
        reduced = reduce_swatches(
            [(swatch.name, swatch.hex) for swatch in request.swatches],
            cap=request.cap,
            threshold=request.threshold,
            max_colors=request.max_colors
        )

        _record_success("swatches_reduce", request_id, start_time, {"output": len(reduced)})
        return SwatchReduceResponse(
            swatches=[NamedColor(name=swatch.name, hex=swatch.hex) for swatch in reduced],
            dropped=len(request.swatches) - len(reduced)
        )

    except InvalidColorFormat as e:
        raise _invalid_color("swatches_reduce", request_id, start_time, e)

    except HTTPException:
        raise

    except Exception as e:
        raise _internal_error("swatches_reduce", request_id, start_time, e)


@router.post("/vision", response_model=VisionResponse,
             summary="Simulate Color Vision",
             description="Approximate how a palette appears under a color vision deficiency")
async def simulate_vision_route(request: VisionRequest) -> VisionResponse:
    request_id = generate_request_id()
    start_time = time.time()
    get_metrics().increment_request_count("vision")

    logger.info(f"vision request {request_id} started", extra={
        "request_id": request_id,
        "mode": request.mode,
        "colors": len(request.colors)
    })

    try:
        colors = [parse_color(color) for color in request.colors]
        simulated = simulate_palette(colors, request.mode)

        _record_success("vision", request_id, start_time, {"mode": request.mode})
        return VisionResponse(mode=request.mode, colors=colors, simulated=simulated)

    except InvalidColorFormat as e:
        raise _invalid_color("vision", request_id, start_time, e)

    except HTTPException:
        raise

    except Exception as e:
        raise _internal_error("vision", request_id, start_time, e)


@router.get("/metrics", response_model=MetricsResponse,
            summary="Metrics",
            description="In-process request counters and timings")
async def metrics_summary() -> MetricsResponse:
    if not config.METRICS_ENABLED:
        raise HTTPException(status_code=404, detail="Metrics are disabled")
    return MetricsResponse(**get_metrics().get_summary())

"""Tests for spice-bridge."""

from __future__ import annotations

import logging
import math
import textwrap

import pytest

from unittest.mock import patch

import spiceypy as spice
from spiceypy.utils.exceptions import SpiceyError

from spice_bridge import kernels
from spice_bridge.cli import main, parse_params, parse_value
from spice_bridge.config import (
    Config,
    apply_config,
    load_config,
    save_config,
    show_config,
)
from spice_bridge.errors import (
    ErrorAction,
    ErrorDevice,
    ErrorItems,
    get_erract,
    get_errdev,
    get_errprt,
    set_erract,
    set_errdev,
    set_errprt,
)
from spice_bridge.guard import error_state, implied_result, invoke, raise_spice_error
from spice_bridge.kernels import (
    KernelType,
    classify_kernel,
    clear_all,
    combine_paths,
    enumerate_kernels,
    furnsh,
    kdata,
    kinfo,
    ktotal,
    resolve_path,
    unload,
)
from spice_bridge.registry import Arg, Binding, Out, bindings, lookup, register
from spice_bridge.result import ErrorState, ResultCode, SpiceCallError, SpiceResult
from spice_bridge.units import (
    Angle,
    AngularRate,
    AngularVelocity,
    DimensionlessVector,
    Distance,
    DistanceVector,
    EphemerisTime,
    EulerAngleRates,
    EulerAngles,
    GeodeticVectorRates,
    LatitudinalVector,
    Quaternion,
    RotationMatrix,
    StateTransform,
    StateVector,
    Window,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def clean_spice():
    """Every test starts and ends with no kernels and a clear error slot."""
    previous_root = kernels.content_root()
    clear_all()
    yield
    clear_all()
    kernels.set_content_root(previous_root)


@pytest.fixture
def content_root(tmp_path):
    root = tmp_path / "content"
    root.mkdir()
    kernels.set_content_root(root)
    return kernels.content_root()


@pytest.fixture
def text_kernel(content_root):
    """A small text kernel below the content root."""
    kdir = content_root / "kernels"
    kdir.mkdir()
    (kdir / "test_values.tpc").write_text(textwrap.dedent("""\
        KPL/PCK

        \\begindata

        TEST_VALUES = ( 1.5, 2.5, 3.5 )
        TEST_NAMES  = ( 'ALPHA', 'BETA' )

        \\begintext
    """))
    return "kernels/test_values.tpc"


EARTH_RADII = [6378.1366, 6378.1366, 6356.7519]


# ---------------------------------------------------------------------------
# Unit tests: result
# ---------------------------------------------------------------------------

class TestSpiceResult:
    def test_success_has_empty_message(self):
        result = SpiceResult.success((1.0,), label="x")
        assert result.ok
        assert result.message == ""
        assert result.value == 1.0

    def test_failure_message_from_state(self):
        state = ErrorState(triggered=True, short="SPICE(BAD)", long="Bad input.")
        result = SpiceResult.failure(state, label="call")
        assert result.code is ResultCode.FAILURE
        assert result.message == "SPICE(BAD): Bad input."
        assert result.short == "SPICE(BAD)"

    def test_failure_without_text_still_has_message(self):
        result = SpiceResult.failure(ErrorState(triggered=True), label="vhat")
        assert result.message
        assert "vhat" in result.message

    def test_not_found_names_the_call(self):
        result = SpiceResult.not_found("bodn2c")
        assert result.code is ResultCode.NOT_FOUND
        assert not result.found
        assert "bodn2c" in result.message

    def test_value_shapes(self):
        assert SpiceResult.success().value is None
        assert SpiceResult.success((1, 2)).value == (1, 2)

    def test_unwrap_raises_for_failure(self):
        state = ErrorState(triggered=True, short="SPICE(BAD)", long="Bad.")
        with pytest.raises(SpiceCallError) as exc_info:
            SpiceResult.failure(state, label="x").unwrap()
        assert exc_info.value.code is ResultCode.FAILURE
        assert exc_info.value.short == "SPICE(BAD)"

    def test_bool(self):
        assert SpiceResult.success()
        assert not SpiceResult.not_found("x")


# ---------------------------------------------------------------------------
# Unit tests: guard
# ---------------------------------------------------------------------------

class TestInvoke:
    def test_spiceyerror_becomes_failure(self):
        def broken():
            raise SpiceyError(short="SPICE(FAKE)", long="Something broke.")

        result = invoke(broken, label="broken")
        assert result.code is ResultCode.FAILURE
        assert "SPICE(FAKE)" in result.message
        assert "Something broke." in result.message
        assert not error_state().triggered

    def test_none_output_gives_no_values(self):
        result = invoke(lambda: None)
        assert result.ok
        assert result.values == ()

    def test_found_flag_false(self):
        result = invoke(lambda: (42, False), found=True, label="lookup")
        assert result.code is ResultCode.NOT_FOUND
        assert "lookup" in result.message

    def test_found_flag_true(self):
        result = invoke(lambda: (42, True), found=True)
        assert result.ok
        assert result.value == 42

    def test_found_flag_alone(self):
        assert invoke(lambda: True, found=True).ok
        assert invoke(lambda: False, found=True).code is ResultCode.NOT_FOUND

    def test_vectorized_found_flags_all_required(self):
        result = invoke(lambda: ([1, 2], [True, False]), found=True)
        assert result.code is ResultCode.NOT_FOUND

    def test_conversion_error_becomes_failure(self):
        def convert(raw):
            raise ValueError("wrong shape")

        result = invoke(lambda: 1.0, convert=convert, label="shape")
        assert result.code is ResultCode.FAILURE
        assert "wrong shape" in result.message

    def test_short_output_becomes_failure(self):
        result = invoke(lambda: (1.0,), convert=lambda raw: (raw[0], raw[1]))
        assert result.code is ResultCode.FAILURE
        assert result.message

    def test_error_pending_before_call_is_cleared(self):
        spice.setmsg("Left over from an earlier call.")
        spice.sigerr("SPICE(LEFTOVER)")
        assert error_state().triggered

        result = lookup("pi")()
        assert result.ok
        assert result.message == ""

    def test_python_error_propagates_with_clear_slot(self):
        def broken():
            raise ZeroDivisionError("division by zero")

        with pytest.raises(ZeroDivisionError):
            invoke(broken, label="broken")
        assert not error_state().triggered
        assert lookup("pi")().ok

    def test_signal_then_python_error_is_failure(self):
        def broken():
            spice.setmsg("Signalled first.")
            spice.sigerr("SPICE(SIGNALLED)")
            return 1.0 / 0.0

        result = invoke(broken, label="broken")
        assert result.code is ResultCode.FAILURE
        assert result.short == "SPICE(SIGNALLED)"
        assert not error_state().triggered

    def test_signalled_error_then_independent_call_succeeds(self):
        failed = raise_spice_error()
        assert failed.code is ResultCode.FAILURE
        assert failed.short == "SPICE(VALUEOUTOFRANGE)"
        assert "This is a test error." in failed.message
        assert implied_result().ok

        assert lookup("pi")().value == pytest.approx(math.pi)

    def test_custom_signalled_error(self):
        result = raise_spice_error("Custom text.", "SPICE(CUSTOM)")
        assert result.short == "SPICE(CUSTOM)"
        assert "Custom text." in result.message

    def test_patched_spiceypy_error(self):
        with patch(
            "spiceypy.convrt",
            side_effect=SpiceyError(short="SPICE(PATCHED)", long="Patched."),
        ):
            result = lookup("convrt")(1.0, "KM", "M")
        assert result.code is ResultCode.FAILURE
        assert "SPICE(PATCHED)" in result.message


# ---------------------------------------------------------------------------
# Unit tests: registry
# ---------------------------------------------------------------------------

class TestRegistry:
    def test_describe(self):
        info = lookup("spkpos").describe()
        assert info["category"] == "Ephemeris"
        assert [a["name"] for a in info["args"]] == [
            "targ", "et", "ref", "abcorr", "obs",
        ]
        assert [o["name"] for o in info["outs"]] == ["ptarg", "lt"]
        assert info["found"] is False

    def test_required_args_reported(self):
        info = lookup("pdpool").describe()
        assert all(a["required"] for a in info["args"])

    def test_unknown_binding(self):
        with pytest.raises(KeyError):
            lookup("no_such_routine")

    def test_duplicate_rejected(self):
        lookup("pi")
        with pytest.raises(ValueError, match="already registered"):
            register(Binding("pi", outs=(Out("value", float),)))

    def test_required_after_default_rejected(self):
        with pytest.raises(ValueError):
            Binding("bad", args=(Arg("a", float, 1.0), Arg("b", float)))

    def test_unknown_keyword_is_type_error(self):
        with pytest.raises(TypeError):
            lookup("convrt")(bogus=1)

    def test_category_filter(self):
        constants = bindings("constants")
        names = {b.name for b in constants}
        assert {"pi", "dpr", "clight"} <= names
        assert all(b.category == "Constants" for b in constants)

    def test_variants_registered(self):
        for name in (
            "vadd", "vadd_distance", "vadd_velocity", "vadd_angular_velocity",
            "bodvrd_mass",
        ):
            assert lookup(name).name == name

    def test_clock_pointing_and_search_families(self):
        names = {b.name for b in bindings()}
        assert {
            "scs2e", "sce2c", "sct2e", "scencd", "scdecd", "scfmt", "sctiks",
            "ckgp", "ckgpav",
            "spkezp", "spkcvo", "spkcvt",
            "xf2rav", "rav2xf", "xf2eul", "eul2xf", "qdq2av",
            "gfposc", "gfilum", "gfsubc", "gfpa", "gfrr", "gftfov", "gfrfov",
        } <= names
        assert lookup("ckgp").found
        assert lookup("gfrr").describe()["args"][0]["name"] == "cnfine"

    def test_list_arg_item_kind(self):
        dvals = lookup("pdpool").args[1]
        assert dvals.kind is list
        assert dvals.item is float

    def test_binding_signature(self):
        sig = lookup("et2utc").signature
        assert list(sig.parameters) == ["et", "format", "prec"]
        assert sig.parameters["prec"].default == 4


# ---------------------------------------------------------------------------
# Unit tests: unit-tagged payloads
# ---------------------------------------------------------------------------

class TestUnits:
    def test_defaults_are_zero(self):
        rates = GeodeticVectorRates()
        assert rates.dlon.radians_per_second == 0.0
        assert rates.dlat.radians_per_second == 0.0
        assert rates.dalt.kmps == 0.0
        assert DistanceVector().native() == [0.0, 0.0, 0.0]
        assert StateVector().native() == [0.0] * 6
        assert EphemerisTime().seconds == 0.0

    def test_matrices_default_to_zero_not_identity(self):
        assert RotationMatrix().m == ((0.0,) * 3,) * 3
        assert StateTransform().m == ((0.0,) * 6,) * 6
        assert RotationMatrix.identity().m[0] == (1.0, 0.0, 0.0)

    def test_empty_window(self):
        assert len(Window()) == 0

    def test_angle_degrees(self):
        assert Angle.from_degrees(180.0).radians == pytest.approx(math.pi)
        assert Angle(math.pi / 2).degrees == pytest.approx(90.0)

    def test_state_vector_split(self):
        state = StateVector.from_native([1, 2, 3, 4, 5, 6])
        assert state.r == DistanceVector(1.0, 2.0, 3.0)
        assert state.v.dz == 6.0

    def test_record_native_is_flat(self):
        lat = LatitudinalVector(Distance(2.0), Angle(0.5), Angle(0.25))
        assert lat.native() == (2.0, 0.5, 0.25)

    def test_window_cell(self):
        window = Window.of((0.0, 10.0), (20.0, 35.0))
        back = Window.from_native(window.native())
        assert [(s.start.seconds, s.stop.seconds) for s in back] == [
            (0.0, 10.0), (20.0, 35.0),
        ]
        assert back.segments[1].duration == 15.0


# ---------------------------------------------------------------------------
# Integration tests: bound routines against CSPICE, no kernels needed
# ---------------------------------------------------------------------------

class TestBoundRoutines:
    def test_convrt(self):
        result = lookup("convrt")(1.0, "KM", "M")
        assert result.ok
        assert result.value == pytest.approx(1000.0)

    def test_convrt_bad_unit_then_recovery(self):
        result = lookup("convrt")(1.0, "KM", "FURLONGS")
        assert result.code is ResultCode.FAILURE
        assert "SPICE(" in result.message

        again = lookup("convrt")(2.0, "KM", "M")
        assert again.ok
        assert again.message == ""

    def test_missing_pool_variable_not_found_then_success(self):
        result = lookup("gdpool")("NO_SUCH_POOL_VARIABLE", 0, 1)
        assert result.code is ResultCode.NOT_FOUND
        assert "gdpool" in result.message

        assert lookup("halfpi")().value == pytest.approx(math.pi / 2)

    def test_pool_roundtrip(self):
        assert lookup("pdpool")("SB_TEST_VALUES", [1.0, 2.0, 3.0]).ok
        result = lookup("gdpool")("SB_TEST_VALUES", 0, 10)
        assert result.value == [1.0, 2.0, 3.0]

        n, kind = lookup("dtpool")("SB_TEST_VALUES").values
        assert (n, kind) == (3, "N")
        assert lookup("expool")("SB_TEST_VALUES").ok
        assert lookup("expool")("SB_MISSING").code is ResultCode.NOT_FOUND

    def test_character_pool(self):
        assert lookup("pcpool")("SB_TEST_NAMES", ["ALPHA", "BETA"]).ok
        assert lookup("gcpool")("SB_TEST_NAMES", 0, 5).value == ["ALPHA", "BETA"]

    def test_body_names(self):
        assert lookup("bodn2c")("EARTH").value == 399
        assert lookup("bodc2n")(399).value == "EARTH"
        missing = lookup("bodn2c")("NOT A REAL BODY")
        assert missing.code is ResultCode.NOT_FOUND

    def test_boddef(self):
        assert lookup("boddef")("SB_TEST_BODY", 9999001).ok
        assert lookup("bodn2c")("SB_TEST_BODY").value == 9999001

    def test_body_constants_from_pool(self):
        lookup("pdpool")("BODY399_RADII", EARTH_RADII)
        radii = lookup("bodvrd_distance_vector")("EARTH", "RADII")
        assert radii.value == DistanceVector(*EARTH_RADII)
        assert lookup("bodfnd")(399, "RADII").ok

    def test_body_constants_wrong_count(self):
        lookup("pdpool")("BODY399_SB_PAIR", [1.0, 2.0])
        result = lookup("bodvcd_vector")(399, "SB_PAIR")
        assert result.code is ResultCode.FAILURE
        assert "expected 3" in result.message

    def test_body_constants_missing(self):
        result = lookup("bodvrd")("EARTH", "RADII")
        assert result.code is ResultCode.FAILURE

    def test_vector_variants_keep_units(self):
        result = lookup("vadd_distance")(
            DistanceVector(1.0, 2.0, 3.0), DistanceVector(1.0, 1.0, 1.0),
        )
        assert result.value == DistanceVector(2.0, 3.0, 4.0)
        norm = lookup("vnorm_distance")(DistanceVector(3.0, 4.0, 0.0))
        assert norm.value == Distance(5.0)

    def test_vsep_returns_angle(self):
        result = lookup("vsep")(
            DimensionlessVector(1.0, 0.0, 0.0), DimensionlessVector(0.0, 1.0, 0.0),
        )
        assert isinstance(result.value, Angle)
        assert result.value.radians == pytest.approx(math.pi / 2)

    def test_twovec_parallel_vectors_fail(self):
        x = DimensionlessVector(1.0, 0.0, 0.0)
        result = lookup("twovec")(x, 1, x, 2)
        assert result.code is ResultCode.FAILURE
        assert "SPICE(" in result.message

    def test_flattening(self):
        ok = lookup("flattening")(DistanceVector(*EARTH_RADII))
        assert ok.value == pytest.approx((6378.1366 - 6356.7519) / 6378.1366)

        zero = lookup("flattening")(DistanceVector())
        assert zero.code is ResultCode.FAILURE
        assert zero.short == "SPICE(ZERORADIUS)"
        assert not error_state().triggered

        after = lookup("pi")()
        assert after.ok
        assert after.message == ""

    def test_angular_velocity_variant(self):
        result = lookup("vnorm_angular_velocity")(AngularVelocity(3.0, 4.0, 0.0))
        assert result.value == AngularRate(5.0)

    def test_rotation_and_angular_velocity_to_state_transform(self):
        rot = RotationMatrix.identity()
        av = AngularVelocity(0.0, 0.0, 1.0e-3)
        xform = lookup("rav2xf")(rot, av).value
        assert isinstance(xform, StateTransform)

        back_rot, back_av = lookup("xf2rav")(xform).values
        assert back_rot.m[0][0] == pytest.approx(1.0)
        assert back_av.z == pytest.approx(1.0e-3)

    def test_euler_state_transform(self):
        angles = EulerAngles(Angle(0.1), Angle(0.2), Angle(0.3))
        xform = lookup("eul2xf")(angles, EulerAngleRates(), 3, 1, 3).value

        got, rates, unique = lookup("xf2eul")(xform, 3, 1, 3).values
        assert unique is True
        assert got.angle3.radians == pytest.approx(0.1)
        assert got.angle2.radians == pytest.approx(0.2)
        assert got.angle1.radians == pytest.approx(0.3)
        assert rates.rate3.radians_per_second == pytest.approx(0.0, abs=1e-12)

    def test_qdq2av_constant_quaternion(self):
        result = lookup("qdq2av")(Quaternion(1.0, 0.0, 0.0, 0.0), Quaternion())
        assert result.value == AngularVelocity(0.0, 0.0, 0.0)

    def test_spkezp_without_kernels_fails(self):
        result = lookup("spkezp")(301, EphemerisTime(), "J2000", "NONE", 399)
        assert result.code is ResultCode.FAILURE
        assert "SPICE(" in result.message

    def test_sclk_without_kernels_fails(self):
        result = lookup("scs2e")(-82, "1/1465644281.165")
        assert result.code is ResultCode.FAILURE
        assert "SPICE(" in result.message
        assert lookup("pi")().ok

    def test_latrec(self):
        result = lookup("latrec")(
            LatitudinalVector(Distance(2.0), Angle(0.0), Angle(math.pi / 2)),
        )
        x, y, z = result.value
        assert z == pytest.approx(2.0)
        assert abs(x) < 1e-12

    def test_time_needs_leapseconds(self):
        result = lookup("str2et")("2021-10-01T00:00:00")
        assert result.code is ResultCode.FAILURE

    def test_et_now(self):
        result = lookup("et_now")()
        assert result.value.seconds > 7.0e8


# ---------------------------------------------------------------------------
# Integration tests: geometry
# ---------------------------------------------------------------------------

class TestGeometry:
    AXES = [Distance(r) for r in EARTH_RADII]

    def test_nearpt_altitude(self):
        npoint, alt = lookup("nearpt")(DistanceVector(7000.0, 0.0, 0.0), *self.AXES).values
        assert alt.km == pytest.approx(7000.0 - 6378.1366)
        assert npoint.x == pytest.approx(6378.1366)

    def test_surfpt_hit_and_miss(self):
        surfpt = lookup("surfpt")
        origin = DistanceVector(10000.0, 0.0, 0.0)

        hit = surfpt(origin, DimensionlessVector(-1.0, 0.0, 0.0), *self.AXES)
        assert hit.ok
        assert hit.value.x == pytest.approx(6378.1366)

        miss = surfpt(origin, DimensionlessVector(1.0, 0.0, 0.0), *self.AXES)
        assert miss.code is ResultCode.NOT_FOUND

    def test_surfnm(self):
        normal = lookup("surfnm")(*self.AXES, DistanceVector(6378.1366, 0.0, 0.0))
        assert normal.value.x == pytest.approx(1.0)

    def test_search_with_empty_result_is_not_found(self):
        with patch("spiceypy.gfdist") as gfdist:
            result = lookup("gfdist")(Window.of((0.0, 86400.0)))
        assert gfdist.called
        assert result.code is ResultCode.NOT_FOUND
        assert "gfdist" in result.message

    def test_search_result_window(self):
        def fake_search(*args):
            spice.wninsd(100.0, 200.0, args[-1])

        with patch("spiceypy.gfoclt", side_effect=fake_search):
            result = lookup("gfoclt")(Window.of((0.0, 86400.0)))
        assert result.ok
        assert [(s.start.seconds, s.stop.seconds) for s in result.value] == [
            (100.0, 200.0),
        ]

    def test_search_without_kernels_fails(self):
        result = lookup("gfsep")(Window.of((0.0, 3600.0)))
        assert result.code is ResultCode.FAILURE

    def test_reversed_confinement_interval_fails(self):
        result = lookup("gfdist")(Window.of((10.0, 0.0)))
        assert result.code is ResultCode.FAILURE
        assert "SPICE(" in result.message
        assert not error_state().triggered

    def test_more_searches_without_kernels_fail(self):
        cnfine = Window.of((0.0, 3600.0))
        for name in ("gfposc", "gfsubc", "gfilum", "gfpa", "gfrr"):
            result = lookup(name)(cnfine)
            assert result.code is ResultCode.FAILURE, name

    def test_position_search_result_window(self):
        def fake_search(*args):
            spice.wninsd(5.0, 6.0, args[-1])

        with patch("spiceypy.gfposc", side_effect=fake_search) as gfposc:
            result = lookup("gfposc")(Window.of((0.0, 10.0)), relate=">")
        assert gfposc.call_args.args[6] == ">"
        assert result.value.segments[0].stop.seconds == 6.0

    def test_field_of_view_search_empty(self):
        with patch("spiceypy.gftfov") as gftfov:
            result = lookup("gftfov")(Window.of((0.0, 10.0)), "CAM", "MOON")
        assert gftfov.call_args.args[:2] == ("CAM", "MOON")
        assert result.code is ResultCode.NOT_FOUND


# ---------------------------------------------------------------------------
# Integration tests: C-kernel pointing
# ---------------------------------------------------------------------------

class TestPointing:
    IDENTITY = [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]]

    def test_no_pointing_is_not_found(self):
        with patch("spiceypy.ckgp", return_value=(self.IDENTITY, 0.0, False)):
            result = lookup("ckgp")(-82000, 1.0e9, 10.0, "J2000")
        assert result.code is ResultCode.NOT_FOUND
        assert "ckgp" in result.message

    def test_pointing_and_angular_velocity(self):
        raw = (self.IDENTITY, [0.0, 0.0, 1.0e-4], 1.0e9, True)
        with patch("spiceypy.ckgpav", return_value=raw) as ckgpav:
            result = lookup("ckgpav")(-82000, 1.0e9, 10.0, "J2000")
        assert ckgpav.call_args.args == (-82000, 1.0e9, 10.0, "J2000")
        cmat, av, clkout = result.values
        assert cmat == RotationMatrix.identity()
        assert av == AngularVelocity(0.0, 0.0, 1.0e-4)
        assert clkout == 1.0e9


# ---------------------------------------------------------------------------
# Integration tests: kernels
# ---------------------------------------------------------------------------

class TestKernelFiles:
    def test_classify_kernel(self):
        assert classify_kernel("naif0012.tls") == "lsk"
        assert classify_kernel("de432s.BSP") == "spk"
        assert classify_kernel("notes.txt") == "unknown"

    def test_combine_paths(self):
        assert combine_paths("kernels", ["a.tls", "spk/b.bsp"]) == [
            "kernels/a.tls", "kernels/spk/b.bsp",
        ]

    def test_resolve_path(self, content_root):
        assert resolve_path("a/b.tls") == content_root / "a" / "b.tls"
        assert resolve_path("/abs/c.tls").as_posix() == "/abs/c.tls"

    def test_enumerate_missing_directory(self, content_root):
        result = enumerate_kernels("nowhere")
        assert result.code is ResultCode.FAILURE
        assert "nowhere" in result.message

    def test_enumerate_empty_directory(self, content_root):
        (content_root / "empty").mkdir()
        assert enumerate_kernels("empty").code is ResultCode.FAILURE
        result = enumerate_kernels("empty", error_if_no_files_found=False)
        assert result.ok
        assert result.value == []

    def test_enumerate_lists_kernels_sorted(self, content_root):
        kdir = content_root / "kernels"
        (kdir / "spk").mkdir(parents=True)
        (kdir / "spk" / "de432s.bsp").write_bytes(b"FAKE")
        (kdir / "naif0012.tls").write_text("FAKE")
        (kdir / "README.txt").write_text("not a kernel")

        result = enumerate_kernels("kernels")
        assert result.value == ["kernels/naif0012.tls", "kernels/spk/de432s.bsp"]


class TestKernelLoading:
    def test_missing_file_fails(self, content_root):
        result = furnsh("kernels/missing.tls")
        assert result.code is ResultCode.FAILURE
        assert "SPICE(" in result.message

    def test_load_query_unload(self, text_kernel):
        assert furnsh(text_kernel).ok
        assert ktotal().value == 1

        values = lookup("gdpool")("TEST_VALUES", 0, 10)
        assert values.value == [1.5, 2.5, 3.5]

        info = kdata(0).value
        assert info.file == text_kernel
        assert info.kind is KernelType.TEXT

        assert kinfo(text_kernel).value.file == text_kernel

        assert unload(text_kernel).ok
        assert ktotal().value == 0

    def test_clear_all_with_error_pending(self, text_kernel):
        assert furnsh(text_kernel).ok
        spice.setmsg("Left over from an earlier call.")
        spice.sigerr("SPICE(LEFTOVER)")

        clear_all()
        assert not error_state().triggered
        assert ktotal().value == 0

    def test_nothing_loaded(self):
        assert ktotal(KernelType.SPK | KernelType.CK).value == 0
        assert kdata(0).code is ResultCode.NOT_FOUND

    def test_kernel_type_names(self):
        assert KernelType.ALL.spice_kind() == "ALL"
        assert (KernelType.SPK | KernelType.PCK).spice_kind() == "SPK PCK"
        assert KernelType.from_spice("dsk ") is KernelType.DSK

    def test_coverage_of_missing_file_fails(self, content_root):
        assert lookup("spkcov")("spk/missing.bsp", 399).code is ResultCode.FAILURE

    def test_empty_coverage_is_not_found(self, content_root):
        with patch("spiceypy.spkcov") as spkcov:
            result = lookup("spkcov")("spk/fake.bsp", 399)
        assert spkcov.call_args.args[0] == str(content_root / "spk" / "fake.bsp")
        assert result.code is ResultCode.NOT_FOUND


# ---------------------------------------------------------------------------
# Unit tests: error subsystem
# ---------------------------------------------------------------------------

class TestErrorSettings:
    def test_erract_roundtrip(self, caplog):
        try:
            with caplog.at_level(logging.WARNING, logger="spice_bridge"):
                set_erract("report")
            assert get_erract() is ErrorAction.REPORT
            assert "REPORT" in caplog.text
        finally:
            set_erract(ErrorAction.RETURN)
        assert get_erract() is ErrorAction.RETURN

    def test_errdev(self):
        set_errdev(ErrorDevice.NULL)
        assert get_errdev() == (ErrorDevice.NULL, "")

    def test_errdev_file_needs_path(self):
        with pytest.raises(ValueError):
            set_errdev(ErrorDevice.FILE)

    def test_errprt(self):
        try:
            set_errprt(ErrorItems.SHORT | ErrorItems.LONG)
            assert get_errprt() == ErrorItems.SHORT | ErrorItems.LONG
        finally:
            set_errprt(ErrorItems.ALL)


# ---------------------------------------------------------------------------
# Unit tests: config module
# ---------------------------------------------------------------------------

class TestConfig:
    def test_save_and_load(self, tmp_path, monkeypatch):
        config_dir = tmp_path / "config"
        config_file = config_dir / "config.toml"
        monkeypatch.setattr("spice_bridge.config.CONFIG_DIR", config_dir)
        monkeypatch.setattr("spice_bridge.config.CONFIG_FILE", config_file)

        cfg = Config(content_root="/tmp/content", kernel_dir="kernels", log_level="DEBUG")
        save_config(cfg)
        assert config_file.is_file()

        loaded = load_config()
        assert loaded is not None
        assert loaded.content_root == "/tmp/content"
        assert loaded.kernel_dir == "kernels"
        assert loaded.error_action == "RETURN"
        assert loaded.log_level == "DEBUG"

    def test_load_missing_returns_none(self, tmp_path, monkeypatch):
        config_file = tmp_path / "nonexistent" / "config.toml"
        monkeypatch.setattr("spice_bridge.config.CONFIG_FILE", config_file)
        assert load_config() is None

    def test_show_config_prints_paths(self, capsys):
        show_config(Config(content_root="/tmp/content", kernel_dir="kernels"))
        captured = capsys.readouterr()
        assert "/tmp/content" in captured.out
        assert "kernels" in captured.out

    def test_apply_config(self, tmp_path):
        apply_config(Config(content_root=str(tmp_path), log_level="INFO"))
        assert kernels.content_root() == tmp_path.resolve()
        assert logging.getLogger("spice_bridge").level == logging.INFO
        assert get_erract() is ErrorAction.RETURN


# ---------------------------------------------------------------------------
# Integration tests: CLI
# ---------------------------------------------------------------------------

class TestCli:
    @pytest.fixture(autouse=True)
    def cli_config(self, tmp_path):
        cfg = Config(content_root=str(tmp_path), kernel_dir="kernels")
        with patch("spice_bridge.cli.ensure_config", return_value=cfg):
            yield cfg

    def test_call_success(self, capsys):
        assert main(["call", "convrt", "x=2", "in_unit=KM", "out_unit=M"]) == 0
        assert "2000.0" in capsys.readouterr().out

    def test_call_failure_exit_status(self):
        assert main(["call", "convrt", "out_unit=FURLONGS"]) == 1

    def test_call_not_found_exit_status(self, capsys):
        assert main(["call", "gdpool", "name=NO_SUCH_VARIABLE"]) == 2
        assert "NOT_FOUND" in capsys.readouterr().out

    def test_call_unknown_routine(self, capsys):
        assert main(["call", "no_such_routine"]) == 1
        assert "Unknown routine" in capsys.readouterr().err

    def test_call_bad_parameter(self, capsys):
        assert main(["call", "convrt", "bogus=1"]) == 1
        assert "bogus" in capsys.readouterr().err

    def test_call_with_kernel(self, tmp_path, capsys):
        kdir = tmp_path / "kernels"
        kdir.mkdir()
        (kdir / "test.tpc").write_text(
            "KPL/PCK\n\n\\begindata\n\nCLI_VALUE = ( 7.0 )\n\n\\begintext\n"
        )
        status = main([
            "call", "gdpool", "name=CLI_VALUE", "--kernel", "kernels/test.tpc",
        ])
        assert status == 0
        assert "7.0" in capsys.readouterr().out

    def test_describe(self, capsys):
        assert main(["describe", "spkpos"]) == 0
        out = capsys.readouterr().out
        assert "abcorr" in out
        assert "ptarg" in out

    def test_functions_by_category(self, capsys):
        assert main(["functions", "--category", "Constants"]) == 0
        assert "clight" in capsys.readouterr().out

    def test_kernels_listing(self, tmp_path, capsys):
        (tmp_path / "kernels").mkdir()
        (tmp_path / "kernels" / "naif0012.tls").write_text("FAKE")
        assert main(["kernels"]) == 0
        assert "kernels/naif0012.tls" in capsys.readouterr().out

    def test_kernels_missing_directory(self):
        assert main(["kernels", "nowhere"]) == 1

    def test_parse_value(self):
        assert parse_value(Arg("a", Angle), "0.5") == Angle(0.5)
        assert parse_value(Arg("v", DistanceVector), "1,2,3") == DistanceVector(1.0, 2.0, 3.0)
        assert parse_value(Arg("flag", bool), "yes") is True
        window = parse_value(Arg("w", Window), "0:10,20:30")
        assert len(window) == 2
        with pytest.raises(ValueError):
            parse_value(Arg("a", Angle), "1,2")

    def test_parse_list_value(self):
        assert parse_value(Arg("d", list, item=float), "1, 2.5") == [1.0, 2.5]
        assert parse_value(Arg("i", list, item=int), "3,4") == [3, 4]
        assert parse_value(Arg("c", list), "A,B") == ["A", "B"]
        with pytest.raises(ValueError):
            parse_value(Arg("i", list, item=int), "1.5")

    def test_call_with_list_argument(self, capsys):
        assert main(["call", "pdpool", "name=SB_CLI_LIST", "dvals=1,2"]) == 0
        assert lookup("gdpool")("SB_CLI_LIST", 0, 5).value == [1.0, 2.0]

    def test_call_reversed_window_exit_status(self, capsys):
        assert main(["call", "gfdist", "cnfine=10:0"]) == 1
        assert "FAILURE" in capsys.readouterr().out

    def test_verbose_survives_configured_level(self):
        logger = logging.getLogger("spice_bridge")
        try:
            main(["-v", "call", "convrt", "out_unit=FURLONGS"])
            assert logging.getLogger("spice_bridge.guard").isEnabledFor(logging.DEBUG)
        finally:
            logger.setLevel(logging.NOTSET)

    def test_help_does_not_read_config(self, capsys):
        with patch("spice_bridge.cli.ensure_config") as ensure:
            with pytest.raises(SystemExit):
                main(["--help"])
            assert main([]) == 0
        ensure.assert_not_called()
        assert "spice-bridge" in capsys.readouterr().out

    def test_parse_params_requires_key_value(self):
        with pytest.raises(ValueError):
            parse_params(lookup("convrt"), ["KM"])

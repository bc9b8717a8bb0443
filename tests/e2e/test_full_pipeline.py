"""End-to-end tests for the full Native Schema pipeline.

Creates a realistic package of module specs in a temp directory, runs the
tree-sitter front end, the module builder and the combiner over it, and
verifies the JSON schema handed to the code generators.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from native_schema.core.ingestion.combine import CombineResult, combine_schemas, write_schema

CAMERA_SPEC = """\
import type {TurboModule} from 'react-native';
import type {RootTag} from 'react-native';
import {TurboModuleRegistry} from 'react-native';

export type Size = {
  width: number,
  height: number,
};

type PhotoOptions = {
  quality?: Double,
  size: Size,
  tags: Array<string>,
  location: {latitude: number, longitude: number} | null,
};

export interface Spec extends TurboModule {
  getConstants: () => {
    maxZoom: number,
    supportedSizes: ReadonlyArray<Size>,
  };
  takePhoto(rootTag: RootTag, options: PhotoOptions): Promise<string>;
  setZoom(zoom: Float): void;
  onFrame?: (callback: (frame: Object) => void) => void;
  unsupported(): any;
}

export default TurboModuleRegistry.getEnforcing<Spec>('Camera');
"""

FORMATTER_SPEC = """\
import type {TurboModule} from 'react-native';
import {TurboModuleRegistry} from 'react-native';

export enum Style {
  Short = 'short',
  Long = 'long',
}

export interface Spec extends TurboModule {
  format(value: unknown, style: Style, unit: 'bytes' | 'bits'): string;
}

export default TurboModuleRegistry.get<Spec>('FormatterCxx');
"""

HAPTICS_SPEC = """\
import type {TurboModule} from 'react-native';
import {TurboModuleRegistry} from 'react-native';

export interface Spec extends TurboModule {
  vibrate(durationMs: Int32): void;
}

export default TurboModuleRegistry.getEnforcing<Spec>('HapticsAndroid');
"""


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_package(tmp_path: Path) -> Path:
    """Create a package of module specs.

    Layout::

        sample_package/
        +-- src/specs/
        |   +-- NativeCamera.ts      aliases, callbacks, RootTag, one bad method
        |   +-- NativeFormatter.ts   C++-only: enum, unknown, literal union
        |   +-- NativeHaptics.ts     Android-only
        |   +-- __tests__/
        |       +-- NativeCamera-test.ts
        +-- node_modules/react-native/
            +-- NativeVendor.ts
    """
    specs = tmp_path / "src" / "specs"
    specs.mkdir(parents=True)
    (specs / "NativeCamera.ts").write_text(CAMERA_SPEC, encoding="utf-8")
    (specs / "NativeFormatter.ts").write_text(FORMATTER_SPEC, encoding="utf-8")
    (specs / "NativeHaptics.ts").write_text(HAPTICS_SPEC, encoding="utf-8")

    tests = specs / "__tests__"
    tests.mkdir()
    (tests / "NativeCamera-test.ts").write_text(CAMERA_SPEC, encoding="utf-8")

    vendor = tmp_path / "node_modules" / "react-native"
    vendor.mkdir(parents=True)
    (vendor / "NativeVendor.ts").write_text(
        HAPTICS_SPEC.replace("HapticsAndroid", "Vendor"), encoding="utf-8"
    )
    return tmp_path


@pytest.fixture()
def combined(sample_package: Path) -> CombineResult:
    return combine_schemas([sample_package])


def _methods(data: dict) -> dict[str, dict]:
    return {prop["name"]: prop for prop in data["spec"]["properties"]}


# ---------------------------------------------------------------------------
# Test: discovery
# ---------------------------------------------------------------------------


class TestDiscovery:
    def test_modules_found(self, combined: CombineResult) -> None:
        assert set(combined.modules) == {"NativeCamera", "NativeFormatter", "NativeHaptics"}

    def test_no_failures(self, combined: CombineResult) -> None:
        assert combined.failed == []

    def test_results_are_ordered(self, combined: CombineResult) -> None:
        assert [r.path for r in combined.results] == [
            "src/specs/NativeCamera.ts",
            "src/specs/NativeFormatter.ts",
            "src/specs/NativeHaptics.ts",
        ]


# ---------------------------------------------------------------------------
# Test: NativeCamera
# ---------------------------------------------------------------------------


class TestCamera:
    @pytest.fixture()
    def camera(self, combined: CombineResult) -> dict:
        return combined.to_dict()["modules"]["NativeCamera"]

    def test_header(self, camera: dict) -> None:
        assert camera["type"] == "NativeModule"
        assert camera["moduleNames"] == ["Camera"]
        assert "excludedPlatforms" not in camera

    def test_unsupported_method_is_dropped(self, camera: dict, combined: CombineResult) -> None:
        assert list(_methods(camera)) == ["getConstants", "takePhoto", "setZoom", "onFrame"]
        assert [e.kind for e in combined.captured_errors] == ["UnsupportedTypeAnnotation"]

    def test_aliases(self, camera: dict) -> None:
        aliases = camera["aliasMap"]
        assert set(aliases) == {"Size", "PhotoOptions"}
        assert [p["name"] for p in aliases["Size"]["properties"]] == ["width", "height"]

    def test_alias_references(self, camera: dict) -> None:
        options = camera["aliasMap"]["PhotoOptions"]["properties"]
        by_name = {p["name"]: p for p in options}

        assert by_name["quality"]["optional"] is True
        assert by_name["quality"]["typeAnnotation"] == {"type": "DoubleTypeAnnotation"}
        assert by_name["size"]["typeAnnotation"] == {
            "type": "TypeAliasTypeAnnotation",
            "name": "Size",
        }
        assert by_name["tags"]["typeAnnotation"] == {
            "type": "ArrayTypeAnnotation",
            "elementType": {"type": "StringTypeAnnotation"},
        }

    def test_nullable_inline_object(self, camera: dict) -> None:
        options = camera["aliasMap"]["PhotoOptions"]["properties"]
        location = next(p for p in options if p["name"] == "location")["typeAnnotation"]

        assert location["type"] == "NullableTypeAnnotation"
        assert location["typeAnnotation"]["type"] == "ObjectTypeAnnotation"
        assert [p["name"] for p in location["typeAnnotation"]["properties"]] == [
            "latitude",
            "longitude",
        ]

    def test_promise_and_root_tag(self, camera: dict) -> None:
        take_photo = _methods(camera)["takePhoto"]["typeAnnotation"]

        assert take_photo["type"] == "FunctionTypeAnnotation"
        assert take_photo["returnTypeAnnotation"] == {"type": "PromiseTypeAnnotation"}
        assert take_photo["params"][0] == {
            "name": "rootTag",
            "optional": False,
            "typeAnnotation": {"type": "ReservedTypeAnnotation", "name": "RootTag"},
        }

    def test_optional_callback_property(self, camera: dict) -> None:
        on_frame = _methods(camera)["onFrame"]
        assert on_frame["optional"] is True

        (callback,) = on_frame["typeAnnotation"]["params"]
        assert callback["typeAnnotation"]["type"] == "FunctionTypeAnnotation"
        (frame,) = callback["typeAnnotation"]["params"]
        assert frame["typeAnnotation"] == {"type": "GenericObjectTypeAnnotation"}

    def test_constants_read_only_array(self, camera: dict) -> None:
        constants = _methods(camera)["getConstants"]["typeAnnotation"]["returnTypeAnnotation"]
        sizes = next(p for p in constants["properties"] if p["name"] == "supportedSizes")
        assert sizes["typeAnnotation"] == {
            "type": "ArrayTypeAnnotation",
            "elementType": {"type": "TypeAliasTypeAnnotation", "name": "Size"},
        }


# ---------------------------------------------------------------------------
# Test: C++-only and platform-specific modules
# ---------------------------------------------------------------------------


class TestNativeOnly:
    def test_formatter_is_excluded_everywhere(self, combined: CombineResult) -> None:
        formatter = combined.to_dict()["modules"]["NativeFormatter"]
        assert formatter["excludedPlatforms"] == ["iOS", "android"]

    def test_formatter_wider_grammar(self, combined: CombineResult) -> None:
        formatter = combined.to_dict()["modules"]["NativeFormatter"]
        value, style, unit = _methods(formatter)["format"]["typeAnnotation"]["params"]

        assert value["typeAnnotation"] == {"type": "MixedTypeAnnotation"}
        assert style["typeAnnotation"] == {
            "type": "EnumDeclaration",
            "memberType": "StringTypeAnnotation",
        }
        assert unit["typeAnnotation"] == {
            "type": "UnionTypeAnnotation",
            "memberType": "StringTypeAnnotation",
        }

    def test_android_only_module(self, combined: CombineResult) -> None:
        haptics = combined.to_dict()["modules"]["NativeHaptics"]
        assert haptics["excludedPlatforms"] == ["iOS"]

    def test_platform_filter(self, sample_package: Path) -> None:
        ios = combine_schemas([sample_package], platform="ios")
        android = combine_schemas([sample_package], platform="android")

        assert set(ios.modules) == {"NativeCamera"}
        assert set(android.modules) == {"NativeCamera", "NativeHaptics"}


# ---------------------------------------------------------------------------
# Test: output
# ---------------------------------------------------------------------------


def test_written_schema_round_trips(combined: CombineResult, tmp_path: Path) -> None:
    output = write_schema(combined, tmp_path / "schema.json")

    text = output.read_text(encoding="utf-8")
    assert text.endswith("}\n")
    assert json.loads(text) == combined.to_dict()

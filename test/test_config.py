import tempfile
import unittest
from dataclasses import replace
from pathlib import Path

import yaml

from skidryer.config import (
    PARAM_RANGES,
    AnimationConfig,
    Config,
    create_config,
    create_default_config,
    get_config_path,
)
from skidryer.dimensions import REFERENCE_PARAMS, DesignParams


class TestDesignParams(unittest.TestCase):
    def test_01_reference_is_valid(self):
        ok, errors = REFERENCE_PARAMS.validate()
        self.assertTrue(ok, errors)

    def test_02_rejects_bad_options(self):
        ok, errors = replace(REFERENCE_PARAMS, bar_shape='hex', rotation_axis='z').validate()
        self.assertFalse(ok)
        self.assertTrue(any('bar_shape' in e for e in errors))
        self.assertTrue(any('rotation_axis' in e for e in errors))

    def test_03_rejects_inconsistent_sizes(self):
        cases = [
            replace(REFERENCE_PARAMS, bar_wall=10.0),
            replace(REFERENCE_PARAMS, bar_hole_diameter=25.0),
            replace(REFERENCE_PARAMS, horizontal_bar_levels=(1200.0,)),
            replace(REFERENCE_PARAMS, leg_inset=150.0),
            replace(REFERENCE_PARAMS, leg_width=-1.0),
            replace(REFERENCE_PARAMS, hinge_length=80.0),
            replace(REFERENCE_PARAMS, bolt_length=300.0),
        ]
        for params in cases:
            ok, errors = params.validate()
            self.assertFalse(ok, params)
            self.assertTrue(errors)

    def test_04_dict_round_trip(self):
        d = REFERENCE_PARAMS.to_dict()
        self.assertIsInstance(d['horizontal_bar_levels'], list)
        self.assertEqual(DesignParams.from_dict(d), REFERENCE_PARAMS)

    def test_05_from_dict_ignores_unknown_keys(self):
        params = DesignParams.from_dict({'leg_width': 50.0, 'colour': 'red'})
        self.assertEqual(params.leg_width, 50.0)
        self.assertEqual(params.leg_length, REFERENCE_PARAMS.leg_length)


class TestConfig(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "conf" / "config.yaml"

    def tearDown(self):
        self.tmp.cleanup()

    def test_01_default_config_covers_all_fields(self):
        config = create_default_config()
        self.assertEqual(set(config.parameters), set(PARAM_RANGES))
        d = config.get_param_dict()
        self.assertEqual(set(d), set(DesignParams.__dataclass_fields__))
        self.assertEqual(config.get_design_params(), REFERENCE_PARAMS)

    def test_02_save_and_load(self):
        config = create_config(replace(REFERENCE_PARAMS, leg_width=50.0, bar_shape='square'),
                               AnimationConfig(frames=12, clamp=0.2))
        config.save(self.path)
        self.assertTrue(self.path.exists())

        with open(self.path, 'r', encoding='utf-8') as f:
            raw = yaml.safe_load(f)
        self.assertEqual(raw['design']['parameters']['leg_width']['value'], 50.0)
        self.assertEqual(raw['design']['options']['bar_shape'], 'square')

        loaded = Config.load(self.path)
        self.assertEqual(loaded.animation.frames, 12)
        self.assertEqual(loaded.animation.clamp, 0.2)
        params = loaded.get_design_params()
        self.assertEqual(params.leg_width, 50.0)
        self.assertEqual(params.bar_shape, 'square')
        self.assertEqual(params.horizontal_bar_levels, REFERENCE_PARAMS.horizontal_bar_levels)

    def test_03_partial_file_falls_back_to_reference(self):
        self.path.parent.mkdir(parents=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            yaml.safe_dump({'design': {'options': {'rotation_axis': 'y'}}}, f)
        loaded = Config.load(self.path)
        params = loaded.get_design_params()
        self.assertEqual(params.rotation_axis, 'y')
        self.assertEqual(params.leg_length, REFERENCE_PARAMS.leg_length)
        self.assertEqual(loaded.animation.frames, 24)

    def test_04_validate_ranges(self):
        config = create_default_config()
        self.assertTrue(config.validate()[0])

        config.parameters['leg_length'].value = 1000.0
        config.options['bogus'] = 1
        ok, errors = config.validate()
        self.assertFalse(ok)
        self.assertTrue(any('leg_length' in e for e in errors))
        self.assertTrue(any('bogus' in e for e in errors))

    def test_05_animation_section(self):
        config = create_config(REFERENCE_PARAMS, AnimationConfig(frames=6, axis='y'))
        config.save(self.path)
        loaded = Config.load(self.path)
        self.assertEqual(loaded.animation.axis, 'y')
        self.assertTrue(loaded.animation.validate()[0])
        self.assertIsNone(create_default_config().animation.axis)

    def test_06_animation_validate(self):
        self.assertTrue(AnimationConfig().validate()[0])
        self.assertTrue(AnimationConfig(frames=1, clamp=0.0, axis='x').validate()[0])

        ok, errors = AnimationConfig(frames=0, clamp=0.5, axis='X').validate()
        self.assertFalse(ok)
        self.assertEqual(len(errors), 3)
        self.assertTrue(any('frames' in e for e in errors))
        self.assertTrue(any('clamp' in e for e in errors))
        self.assertTrue(any('axis' in e for e in errors))

    def test_07_default_config_path(self):
        self.assertEqual(get_config_path(), Path('config.yaml'))


if __name__ == '__main__':
    unittest.main()

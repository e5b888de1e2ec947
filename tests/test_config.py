"""
Unit tests for autodoc.config module
"""
import unittest
import tempfile
import os
import shutil
import json
from pathlib import Path

from autodoc.config import (
    PLAIN_ENV_VARS,
    apply_env_overrides,
    apply_plain_env_overrides,
    get_config_path,
    get_default_config,
    load_config,
    merge_configs,
    save_config,
)


class TestConfigManagement(unittest.TestCase):
    """Test configuration management functionality"""

    def setUp(self):
        """Set up test environment"""
        self.temp_dir = tempfile.mkdtemp()
        self.original_cwd = os.getcwd()
        self.saved_env = {
            key: value for key, value in os.environ.items()
            if key == 'HOME' or key.startswith('AUTODOC_') or key in PLAIN_ENV_VARS
        }
        for key in self.saved_env:
            del os.environ[key]
        os.environ['HOME'] = self.temp_dir
        os.chdir(self.temp_dir)

    def tearDown(self):
        """Clean up test environment"""
        os.chdir(self.original_cwd)
        for key in list(os.environ):
            if key == 'HOME' or key.startswith('AUTODOC_') or key in PLAIN_ENV_VARS:
                del os.environ[key]
        os.environ.update(self.saved_env)
        shutil.rmtree(self.temp_dir)

    def test_get_default_config(self):
        """Test default configuration structure"""
        config = get_default_config()

        self.assertIn('publish', config)
        self.assertIn('logging', config)

        publish = config['publish']
        self.assertEqual(publish['remote'], 'origin')
        self.assertEqual(publish['branch'], 'gh-pages')
        self.assertEqual(publish['doc_dir'], 'gh-pages')
        self.assertEqual(publish['doc_cmd'], '')
        self.assertEqual(publish['doc_subdir'], '')

    def test_load_config_no_file(self):
        """Test loading config when no file exists"""
        config = load_config()
        self.assertEqual(config, get_default_config())

    def test_default_config_path(self):
        path = get_config_path()
        self.assertEqual(path, Path(self.temp_dir) / '.autodoc' / 'config.json')

    def test_project_config_in_cwd(self):
        """A .autodoc.json next to the repository is picked up"""
        Path(self.temp_dir, '.autodoc.json').write_text(
            json.dumps({'publish': {'doc_cmd': 'make html', 'doc_dir': 'build/html'}})
        )

        config = load_config()

        self.assertEqual(config['publish']['doc_cmd'], 'make html')
        self.assertEqual(config['publish']['doc_dir'], 'build/html')
        # Untouched keys keep their defaults
        self.assertEqual(config['publish']['branch'], 'gh-pages')

    def test_toml_config_from_env_path(self):
        config_file = Path(self.temp_dir) / 'custom.toml'
        config_file.write_text('[publish]\nbranch = "docs"\nremote = "upstream"\n')
        os.environ['AUTODOC_CONFIG'] = str(config_file)

        self.assertEqual(get_config_path(), config_file)
        config = load_config()

        self.assertEqual(config['publish']['branch'], 'docs')
        self.assertEqual(config['publish']['remote'], 'upstream')

    def test_yaml_config(self):
        Path(self.temp_dir, '.autodoc.yaml').write_text(
            'publish:\n  doc_cmd: lein codox\n  doc_subdir: api\n'
        )

        config = load_config()

        self.assertEqual(config['publish']['doc_cmd'], 'lein codox')
        self.assertEqual(config['publish']['doc_subdir'], 'api')

    def test_broken_config_falls_back_to_defaults(self):
        Path(self.temp_dir, '.autodoc.json').write_text('{not json')
        config = load_config()
        self.assertEqual(config['publish']['branch'], 'gh-pages')

    def test_structured_env_override(self):
        os.environ['AUTODOC_PUBLISH_DOC_CMD'] = 'make html'
        os.environ['AUTODOC_PUBLISH_BRANCH'] = 'docs'

        config = load_config()

        self.assertEqual(config['publish']['doc_cmd'], 'make html')
        self.assertEqual(config['publish']['branch'], 'docs')

    def test_structured_env_override_keeps_strings(self):
        """Numeric-looking values stay strings for string settings"""
        config = get_default_config()
        os.environ['AUTODOC_PUBLISH_DOC_SUBDIR'] = '2024'

        config = apply_env_overrides(config)

        self.assertEqual(config['publish']['doc_subdir'], '2024')

    def test_structured_env_override_ignores_unknown_and_sections(self):
        os.environ['AUTODOC_PUBLISH_NO_SUCH_KEY'] = 'x'
        os.environ['AUTODOC_LOGGING'] = 'DEBUG'

        config = apply_env_overrides(get_default_config())

        self.assertNotIn('no_such_key', config['publish'])
        self.assertIsInstance(config['logging'], dict)

    def test_env_value_takes_type_of_setting(self):
        config = {'publish': {'dry_run': False, 'retries': 1}}
        os.environ['AUTODOC_PUBLISH_DRY_RUN'] = 'yes'
        os.environ['AUTODOC_PUBLISH_RETRIES'] = '3'

        config = apply_env_overrides(config)

        self.assertIs(config['publish']['dry_run'], True)
        self.assertEqual(config['publish']['retries'], 3)

    def test_merge_configs_leaves_inputs_alone(self):
        base = {'publish': {'branch': 'gh-pages'}}
        merge_configs(base, {'publish': {'branch': 'docs'}})
        self.assertEqual(base, {'publish': {'branch': 'gh-pages'}})

    def test_plain_env_vars(self):
        """TARGET_REMOTE and friends from the original script"""
        os.environ['TARGET_REMOTE'] = 'upstream'
        os.environ['TARGET_BRANCH'] = 'pages'
        os.environ['DOC_CMD'] = 'boot codox'
        os.environ['DOC_DIR'] = 'target/doc'
        os.environ['DOC_SUBDIR'] = 'v2'

        publish = load_config()['publish']

        self.assertEqual(publish['remote'], 'upstream')
        self.assertEqual(publish['branch'], 'pages')
        self.assertEqual(publish['doc_cmd'], 'boot codox')
        self.assertEqual(publish['doc_dir'], 'target/doc')
        self.assertEqual(publish['doc_subdir'], 'v2')

    def test_plain_env_beats_structured_env_and_file(self):
        Path(self.temp_dir, '.autodoc.json').write_text(json.dumps({'publish': {'branch': 'from-file'}}))
        os.environ['AUTODOC_PUBLISH_BRANCH'] = 'from-autodoc-env'
        os.environ['TARGET_BRANCH'] = 'from-plain-env'

        self.assertEqual(load_config()['publish']['branch'], 'from-plain-env')

    def test_empty_plain_env_var_is_ignored(self):
        os.environ['TARGET_BRANCH'] = ''
        config = apply_plain_env_overrides(get_default_config())
        self.assertEqual(config['publish']['branch'], 'gh-pages')

    def test_merge_configs(self):
        merged = merge_configs(
            {'publish': {'remote': 'origin', 'branch': 'gh-pages'}, 'logging': {'level': 'INFO'}},
            {'publish': {'branch': 'docs'}},
        )
        self.assertEqual(merged['publish'], {'remote': 'origin', 'branch': 'docs'})
        self.assertEqual(merged['logging'], {'level': 'INFO'})

    def test_save_config_json(self):
        target = Path(self.temp_dir) / 'out' / 'config.json'
        save_config({'publish': {'branch': 'docs'}}, target)

        with open(target) as f:
            self.assertEqual(json.load(f), {'publish': {'branch': 'docs'}})

    def test_save_config_toml(self):
        target = Path(self.temp_dir) / '.autodoc.toml'
        save_config({'publish': {'branch': 'docs'}}, target)

        self.assertEqual(load_config()['publish']['branch'], 'docs')


if __name__ == '__main__':
    unittest.main()

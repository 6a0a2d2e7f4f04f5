"""Tests for the command-line interface."""

import csv
import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from cc_taxii2.cli import cli
from cc_taxii2.errors import TaxiiAuthorizationError, TaxiiCollectionError
from cc_taxii2.models import CCIndicator, Discovery

CREDENTIALS = ['--username', 'acme', '--api-key', 's3cr3t']


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def agent():
    with patch('cc_taxii2.cli.CCTaxiiClient') as client_cls:
        instance = client_cls.return_value
        instance.account = 'acme'
        yield instance


@pytest.fixture
def indicators(indicator_dict):
    return [CCIndicator.model_validate(indicator_dict(n)) for n in range(3)]


def test_discovery_json(runner, agent):
    agent.get_discovery.return_value = Discovery(
        api_roots=['/api/'], contact='x@y.com', default='/api/', description='d', title='t'
    )

    result = runner.invoke(cli, CREDENTIALS + ['discovery', '--format', 'json'], obj={})

    assert result.exit_code == 0
    assert json.loads(result.output)['api_roots'] == ['/api/']


def test_discovery_unauthorized(runner, agent, make_response):
    agent.get_discovery.side_effect = TaxiiAuthorizationError(make_response(401))

    result = runner.invoke(cli, CREDENTIALS + ['discovery'], obj={})

    assert result.exit_code == 1
    assert 'HTTP 401' in result.output


def test_collections_private_root(runner, agent):
    agent.get_collections.return_value = ['X', 'Y']

    result = runner.invoke(cli, CREDENTIALS + ['collections', '--private'], obj={})

    assert result.exit_code == 0
    agent.get_collections.assert_called_once_with('acme')
    assert 'X' in result.output and 'Y' in result.output


def test_indicators_json(runner, agent, indicators):
    agent.get_cc_indicators.return_value = indicators

    result = runner.invoke(cli, CREDENTIALS + [
        'indicators', '--collection', 'c1', '--limit', '5', '--single-page',
        '--match', 'type=indicator', '--added-after', '2024-01-01T00:00:00Z',
        '--format', 'json',
    ], obj={})

    assert result.exit_code == 0
    assert [item['name'] for item in json.loads(result.output)] == ['c2-0', 'c2-1', 'c2-2']
    agent.get_cc_indicators.assert_called_once_with(
        collection_id='c1',
        limit=5,
        private=False,
        added_after='2024-01-01T00:00:00Z',
        matches=[('type', 'indicator')],
        follow_pages=False,
        max_pages=None,
    )


def test_indicators_defaults_from_config(runner, agent, indicators):
    agent.get_cc_indicators.return_value = indicators

    result = runner.invoke(cli, CREDENTIALS + ['indicators'], obj={})

    assert result.exit_code == 0
    assert 'Retrieved 3 indicator(s)' in result.output
    kwargs = agent.get_cc_indicators.call_args.kwargs
    assert kwargs['limit'] == 1000
    assert kwargs['follow_pages'] is True


def test_indicators_csv_export(runner, agent, indicators, tmp_path):
    agent.get_cc_indicators.return_value = indicators
    output = tmp_path / 'out' / 'iocs.csv'

    result = runner.invoke(cli, CREDENTIALS + [
        'indicators', '--format', 'csv', '--output', str(output)
    ], obj={})

    assert result.exit_code == 0
    with open(output, newline='') as f:
        rows = list(csv.DictReader(f))
    assert [row['id'] for row in rows] == [i.id for i in indicators]


def test_indicators_stix_bundle(runner, agent, indicators):
    agent.get_cc_indicators.return_value = indicators

    result = runner.invoke(cli, CREDENTIALS + ['indicators', '--format', 'stix'], obj={})

    bundle = json.loads(result.output)
    assert bundle['type'] == 'bundle'
    assert bundle['id'].startswith('bundle--')
    assert len(bundle['objects']) == 3


def test_indicators_no_collections(runner, agent):
    agent.get_cc_indicators.side_effect = TaxiiCollectionError("No collections available")

    result = runner.invoke(cli, CREDENTIALS + ['indicators'], obj={})

    assert result.exit_code == 1
    assert 'No collections available' in result.output


def test_bad_match_filter(runner, agent):
    result = runner.invoke(cli, CREDENTIALS + ['indicators', '--match', 'no-separator'], obj={})

    assert result.exit_code == 2
    agent.get_cc_indicators.assert_not_called()


def test_missing_credentials(runner):
    result = runner.invoke(cli, ['discovery'], obj={})

    assert result.exit_code == 1
    assert 'TAXII_USERNAME' in result.output


def test_cli_username_with_key_from_config(runner, tmp_path):
    custom = tmp_path / 'taxii.yaml'
    custom.write_text("credentials:\n  username: acme\n  api_key: filekey\n")

    with patch('cc_taxii2.cli.CCTaxiiClient') as client_cls:
        client_cls.return_value.get_collections.return_value = ['X']
        result = runner.invoke(cli, ['--config', str(custom), '--username', 'other', 'collections'], obj={})

    assert result.exit_code == 0
    assert client_cls.call_args.args == ('other', 'filekey')


def test_collections_root_and_private_conflict(runner, agent):
    result = runner.invoke(cli, CREDENTIALS + ['collections', '--root', 'api', '--private'], obj={})

    assert result.exit_code == 2
    assert 'cannot be combined' in result.output
    agent.get_collections.assert_not_called()

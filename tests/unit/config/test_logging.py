import json
import logging

from config.logging import JSONFormatter, setup_logging


def make_record(**extra):
    record = logging.LogRecord('application.services.price_aggregator', logging.ERROR, __file__, 10, 'Error fetching %s data', ('Kraken',), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_outputs_one_object():
    entry = json.loads(JSONFormatter().format(make_record()))

    assert entry['level'] == 'ERROR'
    assert entry['logger'] == 'application.services.price_aggregator'
    assert entry['message'] == 'Error fetching Kraken data'
    assert 'source' not in entry


def test_json_formatter_includes_context_fields():
    entry = json.loads(JSONFormatter().format(make_record(source='Kraken', route='Kraken → LUNO')))

    assert entry['source'] == 'Kraken'
    assert entry['route'] == 'Kraken → LUNO'


def test_setup_logging_quiets_httpx():
    setup_logging('DEBUG', json_output=True)

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert isinstance(root.handlers[0].formatter, JSONFormatter)
    assert logging.getLogger('httpx').level == logging.WARNING

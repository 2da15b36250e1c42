from ddos_dashboard.models.csv_parser import parse_csv
from ddos_dashboard.models.dashboard_state import DashboardState

HISTORY = parse_csv(
    "severity,status\n"
    "Critical,Blocked\n"
    "High,Active\n"
    "Critical,Active\n"
    "Low,Blocked\n"
)


def test_configured_names_start_empty():
    state = DashboardState(['a.csv', 'b.csv'])

    assert state.dataset_names() == ['a.csv', 'b.csv']
    assert state.get_dataset('a.csv') == []
    assert state.get_dataset('c.csv') is None


def test_replace_all_swaps_mapping():
    state = DashboardState(['historical_data.csv'])
    before = state.snapshot()

    state.replace_all({'historical_data.csv': HISTORY})

    assert before['historical_data.csv'] == []
    assert state.get_dataset('historical_data.csv') is HISTORY
    assert state.stats['total_records'] == 4


def test_replace_dataset_counts_uploads():
    state = DashboardState(['historical_data.csv', 'attack_types.csv'])

    state.replace_dataset('attack_types.csv', parse_csv("name,value\nSYN Flood,1"))

    assert state.stats['uploads'] == 1
    assert state.stats['last_upload'] is not None
    assert state.stats['datasets_loaded'] == 1
    assert state.stats['empty_datasets'] == 1


def test_summary_metric_cards():
    state = DashboardState(['historical_data.csv'])
    state.replace_all({'historical_data.csv': HISTORY})

    summary = state.summary()

    assert summary['total_attacks'] == 4
    assert summary['blocked'] == 2
    assert summary['active'] == 2
    assert summary['critical'] == 2


def test_summary_without_table():
    summary = DashboardState().summary()

    assert summary['total_attacks'] == 0
    assert summary['critical'] == 0

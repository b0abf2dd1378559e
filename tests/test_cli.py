"""
Tests for the history commands of the generateShareImage entry point.
"""
from PIL import Image

from generateShareImage import delete_history, list_history
from musicshare.history import HistoryStore
from musicshare.models import MusicMetadata


def add_entries(history_path, names):
    store = HistoryStore(history_path)
    image = Image.new('RGB', (8, 8), (1, 2, 3))
    for name in names:
        metadata = MusicMetadata(kind='collection', artist_name='Artist', collection_name=name,
                                 genre='Pop', release_date='2020')
        store.add(metadata, image)


class TestHistoryCommands:

    def test_delete_by_listed_index(self, history_path):
        add_entries(history_path, ['Old', 'Middle', 'New'])
        # listing is newest first: 0 New, 1 Middle, 2 Old
        assert delete_history(history_path, [0, 2]) == 2
        assert [e.display_name for e in HistoryStore(history_path).entries] == ['Middle']

    def test_delete_out_of_range(self, history_path, capsys):
        add_entries(history_path, ['Only'])
        assert delete_history(history_path, [5]) == 0
        assert 'Nothing to delete' in capsys.readouterr().out
        assert len(HistoryStore(history_path).entries) == 1

    def test_list_history(self, history_path, capsys):
        add_entries(history_path, ['First', 'Second'])
        list_history(history_path)
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].startswith('  0') and 'Second - Artist' in lines[0]
        assert 'First - Artist' in lines[1]

    def test_list_empty_history(self, history_path, capsys):
        list_history(history_path)
        assert 'No history yet.' in capsys.readouterr().out

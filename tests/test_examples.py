from pathlib import Path

from nil import parse_and_eval
from nil.environment import make_environment
from nil.parser import parse_type
from nil.types import Layout, LayoutParams

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def read_example(name):
    with open(EXAMPLES / name, 'r', encoding='utf-8') as f:
        # a unit is exactly one expression; drop the file's final newline
        return f.read().strip()


def test_padded_header():
    header = Layout.of(
        ('magic', parse_type('u32')),
        ('flags', parse_type('u16')),
        ('kind', parse_type('u8')),
    )
    env = make_environment({'header': header})
    source = read_example('padded_header.nil')
    assert parse_and_eval(source, env, LayoutParams(word_size=8)) == 8
    assert parse_and_eval(source, env, LayoutParams(word_size=1)) == 7


def test_table_fits():
    entry = Layout.of(('key', parse_type('u64')), ('value', parse_type('fn')))
    env = make_environment({'entry': entry, 'table': parse_type('entry[COUNT]'), 'COUNT': 32})
    source = read_example('table_fits.nil')
    assert parse_and_eval(source, env, LayoutParams(pointer_size=4)) is True


def test_slot_bytes_skips_untaken_branch():
    env = make_environment({'slot': parse_type('u32[4]')})
    source = read_example('slot_bytes.nil')
    assert parse_and_eval(source, env, LayoutParams(word_size=8)) == 16

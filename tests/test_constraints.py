"""
Tests for Constraint Tables
===========================
Tests for the inventory arena, the phoneme filter grammar and table building
in phonogen/phonology/inventory and phonogen/phonology/constraints.
"""

import pytest

from phonogen.phonology.constraints import (
    ConstraintClass,
    ConstraintTable,
    build_class,
    build_table,
    compile_cluster_condition,
    describe_cluster,
    select,
)
from phonogen.phonology.errors import ConstructionError, UnknownSymbolError
from phonogen.phonology.inventory import Inventory


@pytest.fixture(scope="module")
def inventory():
    return Inventory.from_spellings({
        'a': ['a'],
        'i': ['i'],
        'ɛ̃': ['in'],
        'p': ['p'],
        't': ['t'],
        'k': ['k'],
        's': ['s'],
        'm': ['m'],
        'n': ['n'],
        'l': ['l'],
        'ʁ': ['r'],
        'w': ['w'],
    }, name='toy')


def symbols(inventory, clusters):
    return sorted(''.join(inventory[i].symbol for i in c) for c in clusters)


class TestInventory:
    """Tests for the phoneme arena."""

    def test_indices_follow_declaration_order(self, inventory):
        assert inventory.index_of('a') == 0
        assert inventory[3].symbol == 'p'
        assert inventory.symbols[:3] == ('a', 'i', 'ɛ̃')

    def test_vowels_and_consonants(self, inventory):
        assert [p.symbol for p in inventory.vowels()] == ['a', 'i', 'ɛ̃']
        assert len(inventory.consonants()) == len(inventory) - 3

    def test_unknown_symbol(self, inventory):
        assert 'ʃ' not in inventory
        with pytest.raises(UnknownSymbolError):
            inventory.index_of('ʃ')

    def test_symbol_outside_chart(self):
        with pytest.raises(UnknownSymbolError):
            Inventory.from_spellings({'a': ['a'], 'q': ['q']})

    def test_empty_inventory(self):
        with pytest.raises(ConstructionError, match="no phonemes"):
            Inventory.from_spellings({})


class TestFilters:
    """Tests for the YAML phoneme filter grammar."""

    def test_kind(self, inventory):
        assert [p.symbol for p in select(inventory, {'kind': 'vowel'})] == ['a', 'i', 'ɛ̃']

    def test_feature_values(self, inventory):
        stops = select(inventory, {'manner': 'plosive'})
        assert [p.symbol for p in stops] == ['p', 't', 'k']

    def test_feature_list_and_except(self, inventory):
        picked = select(inventory, {'manner': ['nasal', 'approximant'], 'except': ['w']})
        assert [p.symbol for p in picked] == ['m', 'n', 'l', 'ʁ']

    def test_nasality(self, inventory):
        assert [p.symbol for p in select(inventory, {'nasality': 'nasal'})] == ['ɛ̃']

    def test_not_and_any(self, inventory):
        picked = select(inventory, {'kind': 'consonant',
                                    'not': {'any': [{'manner': 'plosive'}, {'symbols': ['s']}]}})
        assert [p.symbol for p in picked] == ['m', 'n', 'l', 'ʁ', 'w']

    def test_sibilant(self, inventory):
        assert [p.symbol for p in select(inventory, {'sibilant': True})] == ['s']

    def test_feature_on_wrong_variant_never_matches(self, inventory):
        """Vowels have no place, so a place filter never picks them."""
        assert all(not p.is_vowel for p in select(inventory, {'place': 'alveolar'}))

    def test_empty_filter_accepts_all(self, inventory):
        assert len(select(inventory, {})) == len(inventory)

    def test_unknown_feature_value(self, inventory):
        with pytest.raises(ConstructionError, match="toy"):
            select(inventory, {'manner': 'trill'}, 'toy')

    def test_unknown_key(self, inventory):
        with pytest.raises(ConstructionError, match="unknown filter key"):
            select(inventory, {'colour': 'red'})

    def test_unknown_symbol(self, inventory):
        with pytest.raises(ConstructionError, match="not in inventory"):
            select(inventory, {'symbols': ['ʃ']})


class TestClusterConditions:
    """Tests for reject/require entries."""

    def test_sequence(self, inventory):
        test = compile_cluster_condition({'sequence': ['s', 't']}, inventory)
        cluster = tuple(inventory.phoneme(s) for s in ('s', 't', 'ʁ'))
        assert test(cluster)
        assert not test(tuple(reversed(cluster)))

    def test_positions_out_of_range(self, inventory):
        with pytest.raises(ConstructionError, match="out of range"):
            compile_cluster_condition({'same_place': [0, 5]}, inventory)

    def test_unknown_condition(self, inventory):
        with pytest.raises(ConstructionError, match="unknown cluster condition"):
            compile_cluster_condition({'rhymes': [0, 1]}, inventory)


class TestBuildClass:
    """Tests for class construction."""

    def test_cartesian_product_with_reject(self, inventory):
        c = build_class({
            'name': 'stop plus liquid',
            'slots': [{'manner': 'plosive'}, {'symbols': ['l', 'ʁ']}],
            'reject': [{'same_place': [0, 1]}],
        }, inventory)
        assert symbols(inventory, c.clusters) == ['kl', 'kʁ', 'pl', 'pʁ', 'tʁ']

    def test_require(self, inventory):
        c = build_class({
            'name': 'nasal plus homorganic stop',
            'slots': [{'manner': 'nasal'}, {'manner': 'plosive'}],
            'require': [{'homorganic': [0, 1]}],
        }, inventory)
        assert symbols(inventory, c.clusters) == ['mp', 'nt']

    def test_clusters_are_indices(self, inventory):
        c = build_class({'name': 'm', 'slots': [{'symbols': ['m']}]}, inventory)
        assert c.clusters == ((inventory.index_of('m'),),)

    def test_derived_class(self, inventory):
        built = [
            build_class({'name': 'single', 'slots': [{'kind': 'consonant'}]}, inventory),
            build_class({'name': 's plus stop', 'slots': [{'symbols': ['s']}, {'manner': 'plosive'}]},
                        inventory),
        ]
        c = build_class({'name': 'stop first', 'restricted': True,
                         'derive': {'from': 'all', 'first': {'manner': 'plosive'}}}, inventory, built)
        assert c.restricted
        assert symbols(inventory, c.clusters) == ['k', 'p', 't']

    def test_derived_from_undeclared(self, inventory):
        with pytest.raises(ConstructionError, match="undeclared"):
            build_class({'name': 'x', 'derive': {'from': ['nothing']}}, inventory, [])

    def test_missing_name(self, inventory):
        with pytest.raises(ConstructionError, match="name"):
            build_class({'slots': [{}]}, inventory)

    def test_too_many_slots(self, inventory):
        with pytest.raises(ConstructionError, match="at most"):
            build_class({'name': 'long', 'slots': [{}, {}, {}, {}]}, inventory)

    def test_empty_class_is_allowed(self, inventory):
        c = build_class({'name': 'none', 'slots': [{'symbols': ['s']}, {'symbols': ['s']}],
                         'reject': [{'same_symbol': [0, 1]}]}, inventory)
        assert c.is_empty


class TestBuildTable:
    """Tests for tables, selectability and conditioning."""

    @pytest.fixture
    def nuclei(self, inventory):
        return build_table('nuclei', [
            {'name': 'vowels', 'slots': [{'kind': 'vowel'}]},
            {'name': 'after w', 'restricted': True, 'slots': [{'symbols': ['a', 'ɛ̃']}]},
            {'name': 'nothing', 'slots': [{'symbols': ['a']}, {'symbols': ['a']}],
             'reject': [{'same_symbol': [0, 1]}]},
        ], inventory, [{'after': {'symbols': ['w']}, 'class': 'after w'}])

    def test_selectable_skips_restricted_and_empty(self, nuclei):
        assert nuclei.selectable == (0,)

    def test_conditioning(self, nuclei, inventory):
        assert nuclei.conditioned_class(inventory.index_of('w')) == 1
        assert nuclei.conditioned_class(inventory.index_of('p')) is None
        assert nuclei.conditioned_class(None) is None

    def test_free_clusters(self, nuclei, inventory):
        assert symbols(inventory, nuclei.free_clusters()) == ['a', 'i', 'ɛ̃']

    def test_members(self, nuclei, inventory):
        assert nuclei.members() == {inventory.index_of(s) for s in ('a', 'i', 'ɛ̃')}

    def test_class_index(self, nuclei):
        assert nuclei.class_index('after w') == 1
        with pytest.raises(ConstructionError):
            nuclei.class_index('after j')

    def test_conditioning_on_unknown_class(self, inventory):
        with pytest.raises(ConstructionError, match="no class named"):
            build_table('nuclei', [{'name': 'vowels', 'slots': [{'kind': 'vowel'}]}], inventory,
                        [{'after': {'symbols': ['w']}, 'class': 'after j'}])

    def test_duplicate_class_name(self, inventory):
        spec = {'name': 'vowels', 'slots': [{'kind': 'vowel'}]}
        with pytest.raises(ConstructionError, match="duplicate"):
            build_table('nuclei', [spec, spec], inventory)

    def test_no_classes(self, inventory):
        with pytest.raises(ConstructionError, match="no classes"):
            build_table('codas', [], inventory)

    def test_tables_are_deterministic(self, inventory):
        specs = [{'name': 'single', 'slots': [{'kind': 'consonant'}]}]
        assert build_table('codas', specs, inventory) == build_table('codas', specs, inventory)

    def test_describe_cluster(self, inventory):
        cluster = (inventory.index_of('s'), inventory.index_of('t'))
        assert describe_cluster(cluster, inventory) == '/st/'

    def test_table_of_plain_classes(self):
        table = ConstraintTable('codas', (ConstraintClass('a', ((0,),)),
                                          ConstraintClass('b', ()),
                                          ConstraintClass('c', ((1,),), restricted=True)))
        assert table.selectable == (0,)
        assert len(table) == 3

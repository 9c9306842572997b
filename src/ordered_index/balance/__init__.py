"""Rebalancing policies, one per index variant."""

from ordered_index.balance.avl import AVLBalancer
from ordered_index.balance.base import Balancer, NoopBalancer
from ordered_index.balance.red_black import RedBlackBalancer
from ordered_index.balance.split_merge import BPlusTreeBalancer, BTreeBalancer, MultiwayBalancer
from ordered_index.balance.treap import TreapBalancer
from ordered_index.balance.wavl import WAVLBalancer

__all__ = [
    "Balancer",
    "NoopBalancer",
    "AVLBalancer",
    "RedBlackBalancer",
    "WAVLBalancer",
    "TreapBalancer",
    "MultiwayBalancer",
    "BTreeBalancer",
    "BPlusTreeBalancer",
]

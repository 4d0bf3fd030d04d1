"""
Generic algorithms with no dependency on the graph classes.

Modules:
    components  - Breadth-first reachability and connected component extraction
    union_find  - Union-Find (disjoint set) data structure
"""

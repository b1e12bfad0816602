#! /usr/bin/env python

##############################################################################
## Copyright (c) 2014 Jeet Sukumaran.
## All rights reserved.
##
## Redistribution and use in source and binary forms, with or without
## modification, are permitted provided that the following conditions are met:
##
##     * Redistributions of source code must retain the above copyright
##       notice, this list of conditions and the following disclaimer.
##     * Redistributions in binary form must reproduce the above copyright
##       notice, this list of conditions and the following disclaimer in the
##       documentation and/or other materials provided with the distribution.
##     * The names of its contributors may not be used to endorse or promote
##       products derived from this software without specific prior written
##       permission.
##
## THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS
## IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
## THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR
## PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL JEET SUKUMARAN OR MARK T. HOLDER
## BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
## CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
## SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
## INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
## CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
## ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
## POSSIBILITY OF SUCH DAMAGE.
##
##############################################################################


"""
Conversion between simulation records and phylogenies.

Each speciation event is an internal node with two children: the first
continues the parent lineage and the second starts the daughter lineage.
Each lineage ends in a leaf whose taxon is labeled with the lineage label
(``s0``, ``s1``, ...). The root is the clade origin (time 0), with one child
per founding lineage. Node times are stored as ``time`` annotations; edge
lengths are derived from them.
"""

import dendropy
from paleosim import record

def _as_bool(v):
    if isinstance(v, str):
        return v.lower() == "true"
    return bool(v)

def _parse_lineage_index(label):
    if not label or label[0] != "s":
        raise ValueError("Cannot parse lineage index from taxon label: '{}'".format(label))
    return int(label[1:])

class Phylogeny(dendropy.Tree):

    @classmethod
    def from_record(cls, sim_record, taxon_namespace=None):
        tree = cls(taxon_namespace=taxon_namespace, is_rooted=True)
        tree.annotations.add_new("t_max", sim_record.t_max)
        root = tree.seed_node
        root.annotations.add_new("time", 0.0)
        start_nodes = {}
        node_times = {root: 0.0}
        children_by_parent = {}
        for lineage in sim_record:
            if lineage.parent is not None:
                children_by_parent.setdefault(lineage.parent, []).append(lineage)
        for lineage in sim_record:
            if lineage.parent is None:
                current = root
            else:
                current = start_nodes[lineage.index]
            for child in children_by_parent.get(lineage.index, []):
                nd = tree.node_factory()
                nd.annotations.add_new("time", child.birth_time)
                current.add_child(nd)
                nd.edge.length = child.birth_time - node_times[current]
                node_times[nd] = child.birth_time
                start_nodes[child.index] = nd
                current = nd
            if lineage.death_time is None:
                end_time = sim_record.t_max
            else:
                end_time = lineage.death_time
            leaf = tree.node_factory()
            leaf.taxon = tree.taxon_namespace.require_taxon(label=lineage.label)
            leaf.annotations.add_new("time", end_time)
            leaf.annotations.add_new("is_extant", lineage.is_extant)
            leaf.annotations.add_new("is_censored", lineage.death_time is None)
            current.add_child(leaf)
            leaf.edge.length = end_time - node_times[current]
        return tree

    def to_record(self, t_max=None):
        return phylo_to_record(self, t_max=t_max)

def phylo_to_record(tree, t_max=None):
    """
    Recovers the simulation record from a tree made by :func:`make_phylo`.
    """
    if t_max is None:
        t_max = tree.annotations.get_value("t_max")
        if t_max is None:
            raise ValueError("Tree does not carry 't_max' and none was given")
    t_max = float(t_max)
    node_lineage = {}
    for nd in tree.postorder_node_iter():
        if nd is tree.seed_node:
            continue
        if nd.is_leaf():
            node_lineage[nd] = _parse_lineage_index(nd.taxon.label)
        else:
            node_lineage[nd] = node_lineage[nd.child_nodes()[0]]
    lineages = {}
    for nd in tree.seed_node.child_nodes():
        idx = node_lineage[nd]
        lineages[idx] = record.Lineage(index=idx, birth_time=0.0, parent=None)
    for nd in tree.preorder_node_iter():
        if nd is tree.seed_node or nd.is_leaf():
            continue
        children = nd.child_nodes()
        if len(children) != 2:
            raise ValueError("Speciation node with {} children".format(len(children)))
        idx = node_lineage[children[1]]
        lineages[idx] = record.Lineage(
                index=idx,
                birth_time=float(nd.annotations.get_value("time")),
                parent=node_lineage[nd])
    for nd in tree.leaf_node_iter():
        if nd is tree.seed_node:
            continue
        lineage = lineages[node_lineage[nd]]
        if _as_bool(nd.annotations.get_value("is_censored")):
            death_time = None
        else:
            death_time = float(nd.annotations.get_value("time"))
        if _as_bool(nd.annotations.get_value("is_extant")):
            lineage.survive(death_time=death_time)
        else:
            lineage.extinguish(death_time)
    indexes = sorted(lineages)
    if indexes != list(range(len(indexes))):
        raise ValueError("Lineage indexes are not contiguous: {}".format(indexes))
    return record.SimulationRecord(
            t_max=t_max,
            lineages=[lineages[idx] for idx in indexes])

def make_phylo(sim_record, taxon_namespace=None):
    """
    Returns a :class:`Phylogeny` (a rooted ``dendropy.Tree``) of all lineages
    in ``sim_record``, extinct ones included.
    """
    return Phylogeny.from_record(sim_record, taxon_namespace=taxon_namespace)

def make_extant_phylo(sim_record, taxon_namespace=None):
    """
    Returns the reconstructed phylogeny of the lineages extant at the
    present, or `None` if no lineage survived.
    """
    tree = make_phylo(sim_record, taxon_namespace=taxon_namespace)
    extinct_taxa = []
    num_extant = 0
    for nd in tree.leaf_node_iter():
        if _as_bool(nd.annotations.get_value("is_extant")):
            num_extant += 1
        else:
            extinct_taxa.append(nd.taxon)
    if num_extant == 0:
        return None
    if extinct_taxa:
        tree.prune_taxa(extinct_taxa, suppress_unifurcations=True)
    return tree

"""Shared record texts and fixtures."""

import logging

import pytest

FULL_RECORD = """\
LOCUS       AB123456                 120 bp    mRNA    linear   PLN 15-MAR-2004
DEFINITION  Arabidopsis thaliana mRNA for hypothetical protein,
            complete cds.
ACCESSION   AB123456
VERSION     AB123456.1  GI:12345678
KEYWORDS    cold stress, drought.
SOURCE      Arabidopsis thaliana (thale cress)
  ORGANISM  Arabidopsis thaliana
            Eukaryota; Viridiplantae; Streptophyta; Embryophyta; Tracheophyta;
            Spermatophyta; Magnoliopsida; Brassicales; Brassicaceae;
            Camelineae; Arabidopsis.
REFERENCE   1  (bases 1 to 120)
  AUTHORS   Smith,J., Doe,A.B. and Roe,C.
  TITLE     Cold-responsive expression of a hypothetical protein in
            Arabidopsis
  JOURNAL   Plant Mol. Biol. 12 (3), 100-110 (2003)
   PUBMED   12345678
REFERENCE   2  (bases 1 to 120)
  AUTHORS   Smith,J.
  TITLE     Direct Submission
  JOURNAL   Submitted (10-JAN-2003) Department of Botany, Example University,
            1 Example Road, Springfield, USA
COMMENT     Sequence submitted as part of a cold-stress
            expression survey.
FEATURES             Location/Qualifiers
     source          1..120
                     /organism="Arabidopsis thaliana"
                     /mol_type="mRNA"
                     /strain="Columbia"
                     /db_xref="taxon:3702"
     gene            10..100
                     /gene="HYP1"
     CDS             10..100
                     /gene="HYP1"
                     /product="hypothetical protein"
                     /translation="MAKLSTVFAASLLLAGCSSSKEETHVKEATKPVSEQAQTRTLDP
                     MKVLAAG"
ORIGIN
        1 atggcgaagc tttcgacggt gttcgcggcg agcttgctgt tggcgggttg ctcgagcagc
       61 aaggaggaga cgcatgtgaa ggaggcgacg aagccggtga gcgagcaggc gcagacgcgt
//
"""

FULL_SEQUENCE = (
    "atggcgaagctttcgacggtgttcgcggcgagcttgctgttggcgggttgctcgagcagc"
    "aaggaggagacgcatgtgaaggaggcgacgaagccggtgagcgagcaggcgcagacgcgt"
)

MINIMAL_RECORD = """\
LOCUS   AB123456   100 bp    DNA linear   PLN 01-JAN-2000
ACCESSION   AB123456
FEATURES             Location/Qualifiers
     source          1..100
                     /mol_type="genomic DNA"
                     /db_xref="taxon:3702"
ORIGIN
        1 actgactg
//
"""

SECOND_RECORD = """\
LOCUS       X56734                  16 bp    DNA     linear   BCT 02-FEB-1999
DEFINITION  E. coli test fragment.
ACCESSION   X56734
FEATURES             Location/Qualifiers
     source          1..16
                     /organism="Escherichia coli"
                     /strain="K-12"
                     /db_xref="taxon:83333"
ORIGIN
        1 ggattcaccg aatggc
//
"""


@pytest.fixture
def full_record_text():
    return FULL_RECORD


@pytest.fixture
def minimal_record_text():
    return MINIMAL_RECORD


@pytest.fixture
def second_record_text():
    return SECOND_RECORD


@pytest.fixture
def full_sequence():
    return FULL_SEQUENCE


@pytest.fixture
def genbank_file(tmp_path):
    """A file holding two records."""
    path = tmp_path / "records.gb"
    path.write_text(FULL_RECORD + SECOND_RECORD)
    return path


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo root logger changes made by setup_logging (e.g. from the CLI)."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers and not type(handler).__module__.startswith('_pytest'):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)

from spritz import broad
from spritz.broad import picardrun
from spritz.pipeline import config_utils


def test_picard_fix_rgs(runner):
    cmd = picardrun.picard_fix_rgs(runner, "/d/a.bam", "/d/a.grouped.bam")
    assert str(cmd) == ("picard-tools AddOrReplaceReadGroups PU=platform PL=illumina SM=sample "
                        "LB=library I=/d/a.bam O=/d/a.grouped.bam")


def test_picard_fix_rgs_with_sort(runner):
    cmd = picardrun.picard_fix_rgs(runner, "/d/a.bam", "/d/a.sorted.grouped.bam", sort=True)
    assert str(cmd).endswith("O=/d/a.sorted.grouped.bam SO=coordinate")


def test_picard_fix_rgs_uses_configured_read_group():
    config = config_utils.default_config(work_dir="/work", read_group={"sm": "patient1"})
    cmd = picardrun.picard_fix_rgs(broad.runner_from_config(config), "/d/a.bam", "/d/b.bam")
    assert "SM=patient1" in cmd.args
    assert "PL=illumina" in cmd.args


def test_picard_mark_duplicates(runner):
    cmd = picardrun.picard_mark_duplicates(runner, "/d/a.bam", "/d/a.marked.bam", "/d/a.marked.metrics")
    assert str(cmd) == ("picard-tools MarkDuplicates I=/d/a.bam O=/d/a.marked.bam "
                        "M=/d/a.marked.metrics AS=true")


def test_picard_index_ref_writes_dict_beside_fasta(runner):
    cmd = picardrun.picard_index_ref(runner, "/ref/genome.fa")
    assert str(cmd) == "picard-tools CreateSequenceDictionary R=/ref/genome.fa O=/ref/genome.dict"


def test_picard_sort_vcf_uses_sequence_dictionary(runner):
    cmd = picardrun.picard_sort_vcf(runner, "/d/a.vcf", "/d/a.sorted.vcf", "/ref/genome.dict")
    assert str(cmd) == ("java -Xmx20G -jar /work/picard.jar SortVcf I=/d/a.vcf O=/d/a.sorted.vcf "
                        "SEQUENCE_DICTIONARY=/ref/genome.dict")

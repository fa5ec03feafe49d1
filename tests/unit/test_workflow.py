import datetime
import os

import pytest

from spritz.pipeline import version
from spritz.workflow import SpritzFlow, WorkflowResult, WorkflowType, read_summary
from spritz.workflow import base, variants


class _Flow(SpritzFlow):

    def __init__(self, error=None):
        super(_Flow, self).__init__(WorkflowType.LNCRNA_DISCOVERY)
        self.error = error
        self.inputs = None

    def run_specific(self, output_folder, genome_fastas, gene_sets, rnaseq_files):
        self.inputs = (output_folder, genome_fastas, gene_sets, rnaseq_files)
        if self.error:
            raise self.error


class TestRunTask(object):

    def test_success_writes_summary(self, tmpdir):
        out_dir = str(tmpdir.join("out"))
        flow = _Flow()
        result = flow.run_task(out_dir, ["g.fa"], ["genes.gtf"], ["a.bam"])
        assert flow.inputs == (out_dir, ["g.fa"], ["genes.gtf"], ["a.bam"])
        assert result.succeeded
        assert result.workflow_type == WorkflowType.LNCRNA_DISCOVERY
        assert result.summary_file == os.path.join(out_dir, base.RESULTS_FILE)
        assert result.raise_for_error() is result
        label, elapsed = read_summary(result.summary_file)
        assert label == "Spritz: version %s" % version.__version__
        assert abs((elapsed - result.elapsed).total_seconds()) < 1e-3

    def test_elapsed_uses_monotonic_clock(self, mocker, tmpdir):
        clock = mocker.patch.object(base, "time")
        clock.monotonic.side_effect = [100.0, 3761.5]
        result = _Flow().run_task(str(tmpdir), [], [], [])
        assert result.elapsed == datetime.timedelta(hours=1, minutes=1, seconds=1.5)
        assert read_summary(result.summary_file)[1] == datetime.timedelta(hours=1, minutes=1, seconds=1.5)

    def test_failure_returns_original_error(self, tmpdir):
        error = RuntimeError("GATK missing")
        result = _Flow(error).run_task(str(tmpdir), [], [], [])
        assert not result.succeeded
        assert result.error is error
        assert result.summary_file is None
        assert isinstance(result.elapsed, datetime.timedelta)
        assert not os.path.exists(str(tmpdir.join(base.RESULTS_FILE)))
        with pytest.raises(RuntimeError) as excinfo:
            result.raise_for_error()
        assert excinfo.value is error


class TestSummary(object):

    @pytest.mark.parametrize("elapsed", [
        datetime.timedelta(seconds=5),
        datetime.timedelta(hours=3, minutes=2, seconds=1, microseconds=250),
        datetime.timedelta(days=2, seconds=7),
    ])
    def test_elapsed_time_parses(self, tmpdir, elapsed):
        label, parsed = read_summary(base.write_summary(str(tmpdir), elapsed))
        assert label.startswith("Spritz: version")
        assert abs((parsed - elapsed).total_seconds()) < 1e-6

    def test_unexpected_content(self, tmpdir):
        summary = tmpdir.join(base.RESULTS_FILE)
        summary.write("Spritz\nnot a time")
        with pytest.raises(ValueError):
            read_summary(str(summary))


class TestVariantCallingFlow(object):

    @pytest.fixture
    def steps(self, mocker):
        steps = {"known": mocker.patch("spritz.workflow.variants.knownsites.download_known_sites",
                                       return_value="/out/All_20170710.ensembl.vcf"),
                 "prep": mocker.patch("spritz.workflow.variants.bamprep.prepare_bam",
                                      side_effect=lambda runner, bam, ref: bam + ".prep"),
                 "realign": mocker.patch("spritz.workflow.variants.realign.realign_indels",
                                         side_effect=lambda runner, ref, bam, threads, known: bam + ".re"),
                 "recal": mocker.patch("spritz.workflow.variants.recalibrate.base_recalibration",
                                       side_effect=lambda runner, ref, bam, known: bam + ".recal"),
                 "call": mocker.patch("spritz.workflow.variants.gatk.variant_calling",
                                      side_effect=lambda runner, ref, bam, known, threads: bam + ".vcf")}
        yield steps

    def test_runs_steps_for_each_bam(self, config, steps, tmpdir):
        flow = variants.VariantCallingFlow(config, threads=3, genome_build="GRCh38")
        result = flow.run_task(str(tmpdir), ["/ref/g.fa"], [], ["/d/a.bam", "/d/b.bam"])
        assert result.succeeded
        assert result.workflow_type == WorkflowType.FASTQ2PROTEINS
        steps["known"].assert_called_once_with(flow.runner, str(tmpdir), True, False, True, "/ref/g.fa")
        assert flow.vcfs == ["/d/a.bam.prep.re.vcf", "/d/b.bam.prep.re.vcf"]
        assert flow.recal_tables == ["/d/a.bam.prep.re.recal", "/d/b.bam.prep.re.recal"]
        steps["call"].assert_called_with(flow.runner, "/ref/g.fa", "/d/b.bam.prep.re",
                                         "/out/All_20170710.ensembl.vcf", 3)

    def test_rerun_reports_only_latest_outputs(self, config, steps, tmpdir):
        flow = variants.VariantCallingFlow(config)
        flow.run_task(str(tmpdir), ["/ref/g.fa"], [], ["/d/a.bam", "/d/b.bam"])
        flow.run_task(str(tmpdir), ["/ref/g.fa"], [], ["/d/c.bam"])
        assert flow.vcfs == ["/d/c.bam.prep.re.vcf"]
        assert flow.recal_tables == ["/d/c.bam.prep.re.recal"]

    def test_requires_reference(self, config, steps, tmpdir):
        result = variants.VariantCallingFlow(config).run_task(str(tmpdir), [], [], ["/d/a.bam"])
        assert isinstance(result.error, ValueError)
        assert not steps["prep"].called


def test_workflow_result_fields():
    result = WorkflowResult(WorkflowType.FASTQ2PROTEINS, "/out/results.txt",
                            datetime.timedelta(seconds=1), None)
    assert result.succeeded

import pytest

from spritz import broad
from spritz.broad import Command, CommandError
from spritz.pipeline import config_utils


class TestCommand(object):

    def test_str_joins_program_and_args(self):
        cmd = Command(["java", "-jar", "x.jar"], ["-T", "PrintReads", 4])
        assert str(cmd) == "java -jar x.jar -T PrintReads 4"
        assert cmd.to_list() == ["java", "-jar", "x.jar", "-T", "PrintReads", "4"]

    def test_equality(self):
        assert Command(["samtools"], ["index", "/a.bam"]) == Command(["samtools", "index"], ["/a.bam"])
        assert Command(["samtools"], ["index"]) != "samtools index"


class TestBroadRunner(object):

    def test_cl_gatk(self, runner):
        cmd = runner.cl_gatk("PrintReads", ["-R", "/ref/g.fa", "-I", "/d/a.bam", "-o", "/d/b.bam"])
        assert str(cmd) == ("java -Xmx20G -jar /work/GenomeAnalysisTK.jar -T PrintReads "
                            "-R /ref/g.fa -I /d/a.bam -o /d/b.bam")

    @pytest.mark.parametrize("params", [
        ["-R", "/ref/g.fa", "-o", "/d/b.bam"],
        ["-R", "/ref/g.fa", "-I", "", "-o", "/d/b.bam"],
        ["-R", "/ref/g.fa", "-I", None, "-o", "/d/b.bam"],
        ["-R", "/ref/g.fa", "-I", "/d/a.bam", "-o"],
    ])
    def test_cl_gatk_rejects_missing_arguments(self, runner, params):
        with pytest.raises(CommandError):
            runner.cl_gatk("PrintReads", params)

    def test_command_error_is_value_error(self, runner):
        with pytest.raises(ValueError):
            runner.cl_gatk("IndelRealigner", ["-R", "/ref/g.fa", "-I", "/d/a.bam", "-o", "/d/b.bam"])

    def test_cl_picard(self, runner):
        cmd = runner.cl_picard("SortSam", [("SO", "coordinate"), ("I", "/d/a.bam"), ("O", "/d/b.bam")])
        assert str(cmd) == "picard-tools SortSam SO=coordinate I=/d/a.bam O=/d/b.bam"

    def test_cl_picard_rejects_missing_option(self, runner):
        with pytest.raises(CommandError):
            runner.cl_picard("AddOrReplaceReadGroups", [("PU", "platform"), ("PL", "illumina"),
                                                        ("LB", "library"),
                                                        ("I", "/d/a.bam"), ("O", "/d/b.bam")])

    def test_cl_picard_jar(self, runner):
        cmd = runner.cl_picard_jar("SortVcf", [("I", "/d/a.vcf"), ("O", "/d/b.vcf")])
        assert str(cmd) == "java -Xmx20G -jar /work/picard.jar SortVcf I=/d/a.vcf O=/d/b.vcf"

    def test_cl_samtools(self, runner):
        assert str(runner.cl_samtools("index", ["/d/a.bam"])) == "samtools index /d/a.bam"
        with pytest.raises(CommandError):
            runner.cl_samtools("index", [])
        with pytest.raises(CommandError):
            runner.cl_samtools("faidx", [""])

    def test_configured_programs(self):
        config = config_utils.default_config(work_dir="/work")
        config["resources"]["gatk"] = {"cmd": "/opt/java", "jar": "/opt/gatk/GATK.jar",
                                       "jvm_opts": ["-Xms1g", "-Xmx4g"]}
        config["resources"]["samtools"] = {"cmd": "/opt/bin/samtools"}
        runner = broad.runner_from_config(config)
        cmd = runner.cl_gatk("PrintReads", ["-R", "/r.fa", "-I", "/a.bam", "-o", "/b.bam"])
        assert cmd.program == ["/opt/java", "-Xms1g", "-Xmx4g", "-jar", "/opt/gatk/GATK.jar"]
        assert str(runner.cl_samtools("faidx", ["/r.fa"])) == "/opt/bin/samtools faidx /r.fa"

    def test_paths_converted_for_drive_letter_work_dir(self):
        runner = broad.runner_from_config(config_utils.default_config(work_dir="C:\\work"))
        assert runner.cd_work_dir() == "cd /mnt/c/work"
        assert runner.cl_gatk("HaplotypeCaller", ["-R", "/r.fa", "-I", "/a.bam", "-o", "/a.vcf"]) \
            .program[-1] == "/mnt/c/work/GenomeAnalysisTK.jar"

    def test_run_script_writes_to_scripts_dir(self, mocker, runner, config):
        run = mocker.patch("spritz.broad.do.run_script", return_value=0)
        assert runner.run_script("test.bash", ["echo"], "Test") == 0
        run.assert_called_once_with("/work/scripts/test.bash", ["echo"], config, "Test")

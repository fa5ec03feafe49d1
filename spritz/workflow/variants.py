"""Variant calling on aligned RNA-Seq BAM files following GATK best practices.

For each BAM: prepare (read groups, sorting, duplicates, split reads, mapping
qualities), realign indels, build base recalibration tables and call
variants with HaplotypeCaller, using dbSNP known sites when a genome build
is given.
"""
from spritz import broad
from spritz.log import logger
from spritz.variation import bamprep, gatk, knownsites, realign, recalibrate
from spritz.workflow.base import SpritzFlow, WorkflowType


class VariantCallingFlow(SpritzFlow):

    def __init__(self, config, threads=1, genome_build=None, common_known_sites=True):
        super(VariantCallingFlow, self).__init__(WorkflowType.FASTQ2PROTEINS)
        self.runner = broad.runner_from_config(config)
        self.threads = threads
        self.genome_build = genome_build
        self.common_known_sites = common_known_sites
        self.known_sites = None
        self.recal_tables = []
        self.vcfs = []

    def run_specific(self, output_folder, genome_fastas, gene_sets, rnaseq_files):
        if not genome_fastas:
            raise ValueError("Variant calling needs a reference genome FASTA")
        ref_file = genome_fastas[0]
        self.recal_tables = []
        self.vcfs = []
        self.known_sites = knownsites.download_known_sites(self.runner, output_folder,
                                                           self.common_known_sites,
                                                           self.genome_build == "GRCh37",
                                                           self.genome_build == "GRCh38",
                                                           ref_file)
        for align_bam in rnaseq_files:
            logger.info("Variant calling for %s" % align_bam)
            prep_bam = bamprep.prepare_bam(self.runner, align_bam, ref_file)
            realigned = realign.realign_indels(self.runner, ref_file, prep_bam, self.threads,
                                               self.known_sites)
            self.recal_tables.append(recalibrate.base_recalibration(self.runner, ref_file, realigned,
                                                                    self.known_sites))
            self.vcfs.append(gatk.variant_calling(self.runner, ref_file, realigned, self.known_sites,
                                                  self.threads))

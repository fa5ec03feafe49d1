"""Retrieve dbSNP known variant sites and rename chromosomes to match Ensembl references.

dbSNP publishes GATK-ready VCFs with UCSC style chromosome names (chr1). Ensembl
genomes use 1, so records are rewritten with the UCSC to Ensembl tables from
https://github.com/dpryan79/ChromosomeMappings before use as known sites.
"""
import os

from spritz import utils
from spritz.bam import ref
from spritz.broad import picardrun
from spritz.log import logger
from spritz.pipeline import config_utils


def select_known_sites(config, common_only, grch37, grch38):
    """Pick the genome build and dbSNP URL to download.

    GRCh37 wins when both builds are requested. Returns (None, None) when
    neither is.
    """
    if not grch37 and not grch38:
        return None, None
    build = "GRCh37" if grch37 else "GRCh38"
    return build, config_utils.get_known_sites_url(config, build, common_only)

def known_sites_files(url, target_dir):
    """Downloaded VCF and chromosome remapped VCF for a dbSNP URL.
    """
    base, _ = utils.splitext_plus(url.split("/")[-1])
    return os.path.join(target_dir, base + ".vcf"), os.path.join(target_dir, base + ".ensembl.vcf")

def load_chromosome_mappings(mapping_file):
    """Read a two column, tab delimited chromosome name table.

    Names without a counterpart (empty second column) are left out so they
    pass through unchanged.
    """
    mappings = {}
    with open(mapping_file) as in_handle:
        for line in in_handle:
            parts = line.rstrip("\r\n").split("\t")
            if len(parts) >= 2 and parts[1]:
                mappings[parts[0]] = parts[1]
    return mappings

def remap_chromosomes(in_file, out_file, mappings):
    """Rewrite the first tab delimited field of each line using mappings.
    """
    with open(in_file) as in_handle:
        with open(out_file, "w", newline="\n") as out_handle:
            for line in in_handle:
                parts = line.rstrip("\r\n").split("\t")
                parts[0] = mappings.get(parts[0], parts[0])
                out_handle.write("\t".join(parts) + "\n")
    return out_file

def download_known_sites(runner, target_dir, common_only, grch37, grch38, ref_file):
    """Download dbSNP known sites for a genome build, remapped to Ensembl chromosome names.

    Returns the remapped VCF path, or None if no genome build was requested.
    An existing non-empty remapped VCF in target_dir is reused as is.
    """
    build, url = select_known_sites(runner.config, common_only, grch37, grch38)
    if url is None:
        return None
    raw_vcf, remapped_vcf = known_sites_files(url, target_dir)
    if utils.file_exists(remapped_vcf):
        return remapped_vcf
    utils.safe_makedir(target_dir)
    logger.info("Downloading %s known sites from %s" % (build, url))
    fname = os.path.basename(raw_vcf)
    runner.run_script("download_known_variants.bash",
                      ["cd %s" % runner.convert(target_dir),
                       "wget %s" % url,
                       "gunzip %s.gz" % fname,
                       "rm -f %s.gz" % fname],
                      "Download known sites")
    if not os.path.exists(raw_vcf):
        raise IOError("Known sites download failed, did not find %s" % raw_vcf)
    mapping_file = config_utils.get_chromosome_mappings(runner.config, build)
    logger.info("Renaming chromosomes in %s with %s" % (fname, mapping_file))
    remap_chromosomes(raw_vcf, remapped_vcf, load_chromosome_mappings(mapping_file))
    runner.run_script("sort_known_variants.bash",
                      [runner.cd_work_dir()] + ref.sequence_dictionary_commands(runner, ref_file) +
                      [picardrun.picard_sort_vcf(runner, remapped_vcf,
                                                 utils.replace_suffix(remapped_vcf, ".sorted.vcf"),
                                                 ref.dict_file(ref_file))],
                      "Picard SortVcf")
    if utils.file_exists(remapped_vcf):
        utils.remove_safe(raw_vcf)
    return remapped_vcf

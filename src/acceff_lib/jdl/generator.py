# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Generation of the JDL files of a production.

The run JDL describes the simulation + reconstruction + AOD filtering jobs,
one master job per run split into chunks. The merge JDLs describe the
intermediate and final merging of the produced AODs. In all JDLs,
`$1` is the run number; in the run JDL `$2` is the number of chunks and
`$3` the number of events per chunk; in the merge JDLs `$2` is the merging stage.
"""

from acceff_lib.core.config import CFG
from acceff_lib.core.error import AccEffError
from acceff_lib.properties.settings import SubmitterSettings

from .writer import JDLWriter

LOG_ARCHIVE = (
    "log_archive.zip:stderr,stdout,aod.log,checkaod.log,checkesd.log,rec.log,sim.log@disk=1"
)

# root archives indexed by compact mode
ROOT_ARCHIVES = {
    0: "root_archive.zip:galice*.root,Kinematics*.root,TrackRefs*.root,AliESDs.root,"
    "AliAOD.root,AliAOD.Muons.root,Merged.QA.Data.root,Run*.root@disk=2",
    1: "root_archive.zip:galice*.root,AliAOD.Muons.root@disk=2",
}


def is_jdl(name: str) -> bool:
    """Whether the file name designates a JDL file."""
    return name.lower().endswith(".jdl")


def is_final_merge_jdl(name: str) -> bool:
    """Whether the file name designates the JDL of the final merging stage."""
    return "final" in name.lower()


def snapshot_lfns(remote_dir: str) -> list[str]:
    """Logical file names of the OCDB snapshots, relative to the run (`$1`)."""
    return [
        f"LF:{remote_dir}/OCDB/$1/{CFG.templates.snapshot_marker}{t}.root"
        for t in CFG.templates.snapshot_types
    ]


def generate_run_jdl(settings: SubmitterSettings, template_files: list[str]) -> str:
    """
    Generate the JDL performing the simulation, reconstruction and AOD filtering.

    Args:
        settings (SubmitterSettings): Settings of the production.
        template_files (list[str]): Names of the template files of the production.
            All of them except the JDL files are shipped with the jobs.

    Returns:
        str: Text of the JDL.

    Raises:
        AccEffError: If the compact mode is unknown.
    """
    if settings.compact_mode not in ROOT_ARCHIVES:
        raise AccEffError(f"Unknown compact mode '{settings.compact_mode}'.")

    remote = settings.remote_dir
    jdl = JDLWriter()

    jdl.output("Packages", *settings.packages.toList())
    jdl.output("Jobtag", "comment: acceff RUN $1")
    jdl.output("split", "production:1-$2")
    jdl.output("Price", "1")
    jdl.output("OutputDir", f"{remote}/$1/#alien_counter_03i#")
    jdl.output("Executable", "/alice/bin/aliroot_new")

    input_files = [f"LF:{remote}/{name}" for name in template_files if not is_jdl(name)]
    if settings.use_ocdb_snapshots:
        input_files.extend(snapshot_lfns(remote))
    jdl.output("InputFile", *input_files)

    jdl.output("OutputArchive", LOG_ARCHIVE, ROOT_ARCHIVES[settings.compact_mode])
    jdl.output(
        "splitarguments", "simrun.C --run $1 --chunk #alien_counter# --event $3"
    )
    jdl.output("Workdirectorysize", "5000MB")
    jdl.output("JDLVariables", "Packages", "OutputDir")
    jdl.output("Validationcommand", f"{remote}/validation.sh")
    jdl.output("TTL", "72000")

    return jdl.getText()


def generate_merge_jdl(settings: SubmitterSettings, final: bool) -> str:
    """
    Generate the JDL merging the AODs of a run.

    Args:
        settings (SubmitterSettings): Settings of the production.
        final (bool): Generate the final merging JDL instead of the intermediate one.

    Returns:
        str: Text of the JDL.
    """
    remote = settings.remote_dir
    merged = settings.mergedDir
    jdl = JDLWriter()

    jdl.comment("Generated merging jdl (production mode)")
    jdl.comment("$1 = run number")
    jdl.comment("$2 = merging stage")
    jdl.comment("Stage_<n>.xml made via: find <MergedDir>/$1/Stage_<n-1> *root_archive.zip")

    jdl.output("Packages", *settings.packages.toList())
    jdl.output("Executable", "AOD_merge.sh")
    jdl.output("Price", "1")

    if final:
        jdl.output("Jobtag", "comment: acceff final merging")
    else:
        jdl.output("Jobtag", "comment: acceff merging stage $2")

    jdl.output("Workdirectorysize", "5000MB")
    jdl.output("Validationcommand", f"{remote}/validation_merge.sh")
    jdl.output("TTL", "7200")
    jdl.output(
        "OutputArchive",
        "log_archive.zip:stderr,stdout@disk=1",
        "root_archive.zip:AliAOD.root,AliAOD.Muons.root,AnalysisResults.root@disk=3",
    )

    # for AOD_merge.sh, 1 means intermediate merging stage, 2 means final merging
    jdl.output("Arguments", "2" if final else "1")

    if final:
        jdl.output(
            "InputFile",
            f"LF:{remote}/AODtrain.C",
            f"LF:{merged}/$1/{CFG.merger.final_collection}",
        )
        jdl.output("OutputDir", f"{merged}/$1")
    else:
        jdl.output("InputFile", f"LF:{remote}/AODtrain.C")
        jdl.output("OutputDir", f"{merged}/$1/Stage_$2/#alien_counter_03i#")
        jdl.output("InputDataCollection", f"{merged}/$1/Stage_$2.xml,nodownload")
        jdl.output("split", "se")
        jdl.output("SplitMaxInputFileNumber", str(settings.split_max_input_file_number))
        jdl.output("InputDataListFormat", "xml-single")
        jdl.output("InputDataList", "wn.xml")

    return jdl.getText()

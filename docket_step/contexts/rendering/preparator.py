"""
Docket input document.

Serializes a ProcessContext to the XML document that docket XSLT templates are
written against:

    <process xmlns="http://www.goobi.io/logfile" processID="17">
      <title>Goethe_001</title>
      <properties>
        <property propertyIdentifier="Shelfmark" value="Cod. 12"/>
      </properties>
      <metadatalist>
        <metadata name="TitleDocMain">Faust</metadata>
      </metadatalist>
      <folders>
        <folder role="master">/data/001/master</folder>
      </folders>
    </process>
"""

from pathlib import Path

from lxml import etree

from docket_step.contexts.resolution.job_data_structures import ProcessContext

DOCKET_NAMESPACE = "http://www.goobi.io/logfile"


def _el(parent, tag: str, **attrib) -> etree._Element:
    return etree.SubElement(parent, f"{{{DOCKET_NAMESPACE}}}{tag}", **attrib)


def build_process_xml(process: ProcessContext) -> etree._ElementTree:
    """Build the docket input document for a process."""
    root = etree.Element(
        f"{{{DOCKET_NAMESPACE}}}process",
        nsmap={None: DOCKET_NAMESPACE},
        processID=str(process.process_id),
    )
    _el(root, "title").text = process.title

    properties = _el(root, "properties")
    for name, value in process.properties.items():
        _el(properties, "property", propertyIdentifier=str(name), value=str(value))

    metadata_list = _el(root, "metadatalist")
    for name, value in process.metadata.items():
        _el(metadata_list, "metadata", name=str(name)).text = str(value)

    folders = _el(root, "folders")
    for role, path in sorted(process.folders.items()):
        _el(folders, "folder", role=str(role)).text = str(path)

    return etree.ElementTree(root)


def write_process_xml(process: ProcessContext, xml_path: Path) -> Path:
    """Write the docket input document to xml_path (UTF-8, with declaration)."""
    xml_path = Path(xml_path)
    build_process_xml(process).write(
        str(xml_path), encoding="utf-8", xml_declaration=True, pretty_print=True
    )
    return xml_path

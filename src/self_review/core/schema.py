"""XML Schema for review documents (namespace ``urn:self-review:v1``)."""

NAMESPACE = "urn:self-review:v1"

XSD_SCHEMA = """\
<?xml version="1.0" encoding="UTF-8"?>
<xs:schema
  xmlns:xs="http://www.w3.org/2001/XMLSchema"
  xmlns:sr="urn:self-review:v1"
  targetNamespace="urn:self-review:v1"
  elementFormDefault="qualified"
>

  <xs:element name="review" type="sr:ReviewType">
    <xs:annotation>
      <xs:documentation>
        Root element of a review file. Contains one file element per file
        in the reviewed diff, including files with no comments.
      </xs:documentation>
    </xs:annotation>
  </xs:element>

  <xs:complexType name="ReviewType">
    <xs:sequence>
      <xs:element name="file" type="sr:FileType" minOccurs="0" maxOccurs="unbounded" />
    </xs:sequence>
    <xs:attribute name="timestamp" type="xs:dateTime" use="required">
      <xs:annotation>
        <xs:documentation>
          ISO 8601 timestamp of when the review was saved.
        </xs:documentation>
      </xs:annotation>
    </xs:attribute>
    <xs:attribute name="git-diff-args" type="xs:string" use="optional">
      <xs:annotation>
        <xs:documentation>
          The git diff arguments the review was started with
          (e.g. "--staged", "main..feature-branch"). Git mode only.
        </xs:documentation>
      </xs:annotation>
    </xs:attribute>
    <xs:attribute name="repository" type="xs:string" use="optional">
      <xs:annotation>
        <xs:documentation>
          Absolute path of the repository root. Git mode only.
        </xs:documentation>
      </xs:annotation>
    </xs:attribute>
    <xs:attribute name="source-path" type="xs:string" use="optional">
      <xs:annotation>
        <xs:documentation>
          Directory (or file) whose contents were reviewed as new files.
          Directory mode only.
        </xs:documentation>
      </xs:annotation>
    </xs:attribute>
  </xs:complexType>

  <xs:complexType name="FileType">
    <xs:annotation>
      <xs:documentation>
        A single file in the diff. Files with no comments appear as empty
        elements. For renamed files the path is the new path.
      </xs:documentation>
    </xs:annotation>
    <xs:sequence>
      <xs:element name="comment" type="sr:CommentType" minOccurs="0" maxOccurs="unbounded" />
    </xs:sequence>
    <xs:attribute name="path" type="xs:string" use="required" />
    <xs:attribute name="change-type" type="sr:ChangeTypeEnum" use="required" />
    <xs:attribute name="viewed" type="xs:boolean" use="required">
      <xs:annotation>
        <xs:documentation>
          Whether the reviewer marked this file as viewed. Distinguishes
          "reviewed with no comments" from "not reviewed yet".
        </xs:documentation>
      </xs:annotation>
    </xs:attribute>
  </xs:complexType>

  <xs:complexType name="CommentType">
    <xs:annotation>
      <xs:documentation>
        A review comment. With no line attributes it applies to the whole
        file. new-line-start/new-line-end reference the post-change file,
        old-line-start/old-line-end the pre-change file. At most one pair
        is present; single-line comments have start equal to end.
      </xs:documentation>
    </xs:annotation>
    <xs:sequence>
      <xs:element name="body" type="xs:string" />
      <xs:element name="category" type="xs:string" minOccurs="0" />
      <xs:element name="suggestion" type="sr:SuggestionType" minOccurs="0" />
      <xs:element name="attachment" type="sr:AttachmentType" minOccurs="0" maxOccurs="unbounded" />
    </xs:sequence>
    <xs:attribute name="old-line-start" type="xs:positiveInteger" use="optional" />
    <xs:attribute name="old-line-end" type="xs:positiveInteger" use="optional" />
    <xs:attribute name="new-line-start" type="xs:positiveInteger" use="optional" />
    <xs:attribute name="new-line-end" type="xs:positiveInteger" use="optional" />
  </xs:complexType>

  <xs:complexType name="SuggestionType">
    <xs:annotation>
      <xs:documentation>
        A code replacement proposal: original-code is the text currently at
        the referenced lines, proposed-code its replacement.
      </xs:documentation>
    </xs:annotation>
    <xs:sequence>
      <xs:element name="original-code" type="xs:string" />
      <xs:element name="proposed-code" type="xs:string" />
    </xs:sequence>
  </xs:complexType>

  <xs:complexType name="AttachmentType">
    <xs:annotation>
      <xs:documentation>
        A binary file attached to a comment, stored next to the review
        document. path is relative to the review document.
      </xs:documentation>
    </xs:annotation>
    <xs:attribute name="path" type="xs:string" use="required" />
    <xs:attribute name="media-type" type="xs:string" use="required" />
  </xs:complexType>

  <xs:simpleType name="ChangeTypeEnum">
    <xs:restriction base="xs:string">
      <xs:enumeration value="added" />
      <xs:enumeration value="modified" />
      <xs:enumeration value="deleted" />
      <xs:enumeration value="renamed" />
    </xs:restriction>
  </xs:simpleType>

</xs:schema>
"""
